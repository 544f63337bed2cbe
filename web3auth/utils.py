"""
Utility functions for the Web3 signing service

Shared helpers for request validation and hex string handling.
"""

import re
from typing import Any, Mapping, Optional

from flask import request


class ValidationError(ValueError):
    """Raised when a request field fails boundary validation."""


def require_string_field(data: Mapping[str, Any], field: str, error: str) -> str:
    """
    Fetch a required, non-blank string field from a JSON body.

    Args:
        data: Decoded JSON object
        field: Key to read
        error: Message carried by the raised ValidationError

    Returns:
        The value with surrounding whitespace removed

    Raises:
        ValidationError: if the field is missing, not a string or blank
    """
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(error)
    return value.strip()


def optional_string_field(data: Mapping[str, Any], field: str, error: str) -> Optional[str]:
    """Like ``require_string_field`` but absent, null or blank values give None."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(error)
    return value.strip() or None


def add_hex_prefix(value: str) -> str:
    """Return ``value`` with a leading ``0x`` (left untouched if present)."""
    return value if value.startswith("0x") else f"0x{value}"


def validate_hex_format(value: str, length: int) -> bool:
    """
    Validate hexadecimal string format.

    Args:
        value: String to validate (no 0x prefix)
        length: Expected hex string length

    Returns:
        True if valid hex string of specified length
    """
    if not value:
        return False
    return bool(re.fullmatch(r"[0-9a-fA-F]{{{}}}".format(length), value))


def client_ip() -> Optional[str]:
    """Best effort client address for audit records (ProxyFix already applied)."""
    return request.remote_addr
