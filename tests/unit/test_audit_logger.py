"""
Unit tests for audit logging.
"""

import json
import logging
from unittest.mock import patch

import pytest

from web3auth import audit_logger as audit_module
from web3auth.audit_logger import AuditLogger, get_audit_logger, init_audit_logger


class TestAuditLogger:
    """Test audit logger functionality."""

    @pytest.fixture
    def audit_logger(self):
        """Create an AuditLogger instance for testing."""
        return AuditLogger()

    def test_log_signature_verification_success(self, audit_logger):
        signature = "0x" + "ab" * 65
        with patch.object(audit_logger.logger, "info") as mock_info:
            audit_logger.log_signature_verification(
                signature, True, signer="0x" + "1" * 40, ip_address="192.168.1.1"
            )

            mock_info.assert_called_once()
            call_args = mock_info.call_args[0][0]
            assert "SIG_VERIFY" in call_args
            assert "status=SUCCESS" in call_args
            assert f"signer=0x{'1' * 40}" in call_args
            assert "ip=192.168.1.1" in call_args
            # full signature never lands in the log
            assert signature not in call_args
            assert "sig=0xabababababababab..." in call_args

    def test_log_signature_verification_failure(self, audit_logger):
        with patch.object(audit_logger.logger, "info") as mock_info:
            audit_logger.log_signature_verification("0x00", False, reason="invalid_rs")

            call_args = mock_info.call_args[0][0]
            assert "status=FAILURE" in call_args
            assert "signer=-" in call_args
            assert "reason=invalid_rs" in call_args

    def test_log_validation_error(self, audit_logger):
        with patch.object(audit_logger.logger, "info") as mock_info:
            audit_logger.log_validation_error("/api/verify-signature", "Message is required", ip_address="10.0.0.1")

            call_args = mock_info.call_args[0][0]
            assert "REQUEST_REJECTED" in call_args
            assert "endpoint=/api/verify-signature" in call_args
            assert "reason=Message is required" in call_args

    def test_log_rate_limit_exceeded(self, audit_logger):
        with patch.object(audit_logger.logger, "warning") as mock_warning:
            audit_logger.log_rate_limit_exceeded(ip_address="192.168.1.1", endpoint="/api/verify-signature")

            mock_warning.assert_called_once()
            call_args = mock_warning.call_args[0][0]
            assert "RATE_LIMIT_EXCEEDED" in call_args
            assert "ip=192.168.1.1" in call_args

    def test_log_error_with_context(self, audit_logger):
        with patch.object(audit_logger.logger, "error") as mock_error:
            audit_logger.log_error(error_type="RuntimeError", error_msg="boom", context={"endpoint": "/api"})

            call_args = mock_error.call_args[0][0]
            assert "ERROR" in call_args
            assert "type=RuntimeError" in call_args
            assert "context=" in call_args

    def test_log_event_is_json(self, audit_logger):
        with patch.object(audit_logger.logger, "info") as mock_info:
            audit_logger.log_event("verify.rejected", reason="empty_message")

            payload = json.loads(mock_info.call_args[0][0])
            assert payload["event"] == "verify.rejected"
            assert payload["reason"] == "empty_message"
            assert "timestamp" in payload


class TestAuditLoggerInitialization:
    """Test audit logger initialization."""

    def test_init_audit_logger(self):
        init_audit_logger()

        logger = logging.getLogger("audit")
        assert logger.level == logging.INFO
        assert logger.handlers

    def test_get_audit_logger_initializes_lazily(self):
        with patch.object(audit_module, "_audit_logger", None):
            instance = get_audit_logger()

        assert isinstance(instance, AuditLogger)
