"""
Application Factory for the Web3 signing service

Implements the Flask application factory pattern with:
- Configuration loading and validation
- Security configuration (TLS, headers, CORS, rate limiting)
- Blueprint registration
- JSON error handling
"""

import logging
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from web3auth.audit_logger import get_audit_logger, init_audit_logger
from web3auth.config import get_config, validate_config
from web3auth.metrics import request_counter
from web3auth.security import init_security

logger = logging.getLogger(__name__)


def create_app(config_override: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Create and configure the Flask application using the factory pattern.

    Args:
        config_override: Optional values layered over the environment
            configuration (used by tests)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # Load configuration
    cfg = dict(get_config())
    if config_override:
        cfg.update(config_override)
    validate_config(cfg)
    app.config["APP_CONFIG"] = cfg

    if cfg.get("FLASK_SECRET_KEY"):
        app.secret_key = cfg["FLASK_SECRET_KEY"]
    app.config["MAX_CONTENT_LENGTH"] = cfg.get("MAX_CONTENT_LENGTH")

    # Initialize security middleware (Talisman, CORS, rate limiting, logging)
    init_security(app, cfg)
    init_audit_logger()

    register_blueprints(app)
    register_error_handlers(app)
    register_request_handlers(app)

    logger.info(f"Application factory completed: env={cfg.get('FLASK_ENV')}, version={cfg.get('APP_VERSION')}")
    return app


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""

    # Signature verification (POST /api/verify-signature)
    from web3auth.blueprints.verify import verify_bp
    app.register_blueprint(verify_bp, url_prefix="/api")

    # Health, metrics and frontend configuration
    from web3auth.blueprints.admin import admin_bp
    app.register_blueprint(admin_bp)

    logger.debug("All blueprints registered")


def register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": getattr(e, "description", None) or "Bad request"}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return jsonify({"error": "Request body too large"}), 413

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        get_audit_logger().log_rate_limit_exceeded(request.remote_addr, request.path)
        return jsonify({"error": "Rate limit exceeded", "details": str(e.description)}), 429

    @app.errorhandler(500)
    def internal_error(e):
        logger.error(f"Internal server error: {e}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500


def register_request_handlers(app: Flask) -> None:
    """Register before/after request handlers."""

    @app.after_request
    def count_request(response):
        """Record every response in the request counter."""
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        request_counter.labels(request.method, endpoint, response.status_code).inc()
        return response
