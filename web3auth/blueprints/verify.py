"""
Verification Blueprint - personal_sign signature checks

Validates the request body at the boundary and hands well-formed input to
``web3auth.signatures``. A signature that does not verify is a normal 200
answer; only malformed requests are 400s.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from web3auth import signatures
from web3auth.audit_logger import get_audit_logger
from web3auth.metrics import verification_counter, verification_seconds
from web3auth.security import limiter
from web3auth.utils import ValidationError, client_ip, optional_string_field, require_string_field

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger()

verify_bp = Blueprint("verify", __name__)

MESSAGE_REQUIRED = "Message is required and must be a non-empty string"
SIGNATURE_REQUIRED = "Signature is required and must be a non-empty string"
ADDRESS_INVALID = "Address must be a valid Ethereum address"
BODY_INVALID = "Request body must be a JSON object"


def _verify_rate_limit() -> str:
    return current_app.config["APP_CONFIG"].get("VERIFY_RATE_LIMIT", "30 per minute")


@verify_bp.route("/verify-signature", methods=["POST"])
@limiter.limit(_verify_rate_limit)
def verify_signature():
    """
    Verify an Ethereum personal_sign signature.

    Expected JSON body:
        - message: The signed text
        - signature: 65 byte hex signature, 0x optional
        - address: Optional claimed signer

    Returns:
        JSON with isValid, signer and originalMessage
    """
    data = request.get_json(silent=True)

    try:
        if not isinstance(data, dict):
            raise ValidationError(BODY_INVALID)
        message = require_string_field(data, "message", MESSAGE_REQUIRED)
        signature = require_string_field(data, "signature", SIGNATURE_REQUIRED)
        address = optional_string_field(data, "address", ADDRESS_INVALID)
        if address is not None and not signatures.is_valid_address(address):
            raise ValidationError(ADDRESS_INVALID)
    except ValidationError as e:
        audit_logger.log_validation_error(request.path, str(e), ip_address=client_ip())
        return jsonify({"error": str(e)}), 400

    logger.info(f"Verifying signature for message: {message[:64]!r}")

    try:
        with verification_seconds.time():
            result = signatures.verify_message(message, signature, expected_address=address)
    except Exception as e:
        logger.error(f"Signature verification error: {e}", exc_info=True)
        audit_logger.log_error("verify_signature", type(e).__name__)
        return jsonify({"error": "Internal server error"}), 500

    verification_counter.labels(result="valid" if result.is_valid else "invalid").inc()
    if address is not None:
        audit_logger.log_event(
            "verify.claimed_signer",
            claimed=signatures.to_lower_address(address),
            matched=result.is_valid,
            ip=client_ip(),
        )
    audit_logger.log_signature_verification(
        signature,
        result.is_valid,
        signer=result.signer,
        reason=result.reason,
        ip_address=client_ip(),
    )

    return jsonify(result.to_dict())
