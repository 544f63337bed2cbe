"""
Audit logging for the Web3 signing service.

Security-relevant events (signature checks, rejected requests, failures) are
written to the dedicated ``audit`` logger so they can be routed separately from
application logs.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_logger = logging.getLogger("audit")
_audit_logger = None  # Will be initialized by init_audit_logger


def init_audit_logger():
    """Initialize the audit logger."""
    global _audit_logger

    _logger.setLevel(logging.INFO)

    # Add console handler if not already present
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - AUDIT - %(levelname)s - %(message)s"))
        _logger.addHandler(handler)
        _logger.propagate = False

    _audit_logger = AuditLogger()
    _logger.debug("Audit logger initialized")


def get_audit_logger():
    """Get the audit logger instance."""
    global _audit_logger

    if _audit_logger is None:
        init_audit_logger()
    return _audit_logger


def _short(value: Optional[str], length: int = 12) -> str:
    if not value:
        return "-"
    if len(value) <= length:
        return value
    return f"{value[:length]}..."


class AuditLogger:
    """
    Audit logging interface for security events.

    Messages use a ``KIND | key=value`` layout except ``log_event`` which emits
    a JSON payload.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or _logger

    def log_event(self, event: str, **details: Any) -> None:
        """Generic structured audit event."""

        payload = {"event": event, **details, "timestamp": datetime.now(timezone.utc).isoformat()}
        self.logger.info(json.dumps(payload, default=str))

    def log_signature_verification(
        self,
        signature: str,
        success: bool,
        signer: Optional[str] = None,
        reason: Optional[str] = None,
        ip_address: Optional[str] = None,
    ):
        """Log a personal_sign verification verdict."""
        status = "SUCCESS" if success else "FAILURE"
        msg = f"SIG_VERIFY | sig={_short(signature, 18)} | signer={signer or '-'} | status={status}"
        if reason:
            msg += f" | reason={reason}"
        msg += f" | ip={ip_address}"
        self.logger.info(msg)

    def log_validation_error(self, endpoint: str, reason: str, ip_address: Optional[str] = None):
        """Log a request rejected at the boundary."""
        self.logger.info(f"REQUEST_REJECTED | endpoint={endpoint} | reason={reason} | ip={ip_address}")

    def log_rate_limit_exceeded(self, ip_address: str, endpoint: str):
        """Log rate limit violation."""
        self.logger.warning(f"RATE_LIMIT_EXCEEDED | ip={ip_address} | endpoint={endpoint}")

    def log_error(self, error_type: str, error_msg: str, context: Optional[Dict[str, Any]] = None):
        """Log application error."""
        msg = f"ERROR | type={error_type} | msg={error_msg}"
        if context:
            msg += f" | context={context}"
        self.logger.error(msg)
