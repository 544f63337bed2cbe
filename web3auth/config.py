"""Configuration management for the Web3 signing service.

Centralises environment variable loading and validation logic while keeping the
public API intentionally simple.
"""

from __future__ import annotations

import os
import warnings
from typing import Any, List, Mapping, Optional, TypedDict

_TRUTHY_VALUES = {"1", "true", "yes", "on"}

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001"
DEFAULT_ENVIRONMENT_ID = "623128fa-dcc7-4708-b599-880890d60566"


class AppConfig(TypedDict):
    """Typed representation of the application's configuration."""

    FLASK_SECRET_KEY: Optional[str]
    FLASK_ENV: str
    FLASK_DEBUG: bool
    CORS_ORIGINS: str
    RATE_LIMIT_ENABLED: bool
    RATE_LIMIT_DEFAULT: str
    VERIFY_RATE_LIMIT: str
    REDIS_URL: Optional[str]
    FORCE_HTTPS: bool
    LOG_LEVEL: str
    MAX_CONTENT_LENGTH: int
    DYNAMIC_ENVIRONMENT_ID: str
    API_BASE_URL: str
    APP_NAME: str
    APP_VERSION: str
    APP_HOST: str
    APP_PORT: int


def _get_env_bool(name: str, default: bool) -> bool:
    """Return an environment variable as a boolean."""

    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in _TRUTHY_VALUES


def _get_env_int(name: str, default: int) -> int:
    """Return an environment variable as an integer, raising on invalid input."""

    raw_value = os.getenv(name)
    if raw_value is None or raw_value == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer (got {raw_value!r})") from exc


def parse_origins(raw: Optional[str]) -> List[str]:
    """Split a comma separated CORS origin list, dropping blanks."""
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_config() -> AppConfig:
    """Load application configuration from environment variables."""

    flask_env = os.getenv("FLASK_ENV", "development")
    return {
        # Flask Configuration
        "FLASK_SECRET_KEY": os.getenv("FLASK_SECRET_KEY"),
        "FLASK_ENV": flask_env,
        "FLASK_DEBUG": _get_env_bool("FLASK_DEBUG", False),
        # CORS Configuration
        "CORS_ORIGINS": os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        # Rate Limiting
        "RATE_LIMIT_ENABLED": _get_env_bool("RATE_LIMIT_ENABLED", True),
        "RATE_LIMIT_DEFAULT": os.getenv("RATE_LIMIT_DEFAULT", "200/hour"),
        "VERIFY_RATE_LIMIT": os.getenv("VERIFY_RATE_LIMIT", "30 per minute"),
        "REDIS_URL": os.getenv("REDIS_URL") or os.getenv("REDIS_DSN"),
        "FORCE_HTTPS": _get_env_bool("FORCE_HTTPS", flask_env.lower() == "production"),
        # Logging
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        # Request body limit (JSON payloads)
        "MAX_CONTENT_LENGTH": _get_env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024),
        # Frontend bootstrap configuration
        "DYNAMIC_ENVIRONMENT_ID": os.getenv("DYNAMIC_ENVIRONMENT_ID", DEFAULT_ENVIRONMENT_ID),
        "API_BASE_URL": os.getenv("API_BASE_URL", "/api"),
        # Application Settings
        "APP_NAME": os.getenv("APP_NAME", "Web3 Auth Signing Service"),
        "APP_VERSION": os.getenv("APP_VERSION", "1.0.0"),
        "APP_HOST": os.getenv("APP_HOST", "0.0.0.0"),
        "APP_PORT": _get_env_int("APP_PORT", 3001),
    }


def validate_config(config: Mapping[str, Any]) -> bool:
    """Validate critical configuration values.

    Args:
        config: Configuration mapping to validate.

    Returns:
        True if configuration is valid, raises ValueError otherwise.
    """

    if config.get("FLASK_ENV") == "production":
        if not config.get("FLASK_SECRET_KEY"):
            raise ValueError("FLASK_SECRET_KEY must be set for production!")

        if "*" in parse_origins(config.get("CORS_ORIGINS")):
            raise ValueError("CORS_ORIGINS must list explicit origins in production!")

        if config.get("RATE_LIMIT_ENABLED") is False:
            warnings.warn("RATE_LIMIT_ENABLED is off - the verify endpoint is unthrottled!", stacklevel=2)

    return True
