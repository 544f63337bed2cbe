"""
Admin Blueprint - Health Checks, Metrics, and Frontend Configuration

Provides monitoring endpoints and the public settings the signing frontend
bootstraps from.
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, Response, current_app, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from web3auth.metrics import registry
from web3auth.security import limiter

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/health")
@limiter.exempt
def health():
    """Liveness probe; the verifier has no external dependencies to check."""
    cfg = current_app.config["APP_CONFIG"]
    return jsonify({
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": cfg.get("APP_NAME"),
        "version": cfg.get("APP_VERSION"),
    })


@admin_bp.route("/api/config")
def frontend_config():
    """
    Public configuration consumed by the frontend at startup.

    Returns:
        JSON with the wallet provider environment id and API base URL
    """
    cfg = current_app.config["APP_CONFIG"]
    return jsonify({
        "DYNAMIC_ENVIRONMENT_ID": cfg.get("DYNAMIC_ENVIRONMENT_ID"),
        "API_BASE_URL": cfg.get("API_BASE_URL"),
    })


@admin_bp.route("/metrics")
@limiter.exempt
def metrics():
    """Prometheus metrics endpoint."""
    return Response(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)
