"""
Pytest configuration and shared fixtures for the signing service tests.
"""

import os

import pytest

# Set test environment before importing app
os.environ["FLASK_ENV"] = "testing"
os.environ["FLASK_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FORCE_HTTPS"] = "false"
os.environ["CORS_ORIGINS"] = "http://localhost:3000,http://localhost:3001"

from eth_account import Account  # noqa: E402
from eth_account.messages import encode_defunct  # noqa: E402

# Fixed keys keep failures reproducible
SIGNER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
OTHER_KEY = "0x8da4ef21b864d2cc526dbdb2a120bd2874c36c9d0a1fb7f8c63d7f7a8b41de8f"

TEST_MESSAGE = "Hello, Web3 World!"


def sign_text(message: str, private_key: str = SIGNER_KEY) -> str:
    """Sign ``message`` the way a wallet's personal_sign does; returns 0x hex."""
    signed = Account.sign_message(encode_defunct(text=message), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


@pytest.fixture
def app_config():
    """Overrides layered over the environment configuration."""
    return {
        "FLASK_ENV": "testing",
        "RATE_LIMIT_ENABLED": False,
        "FORCE_HTTPS": False,
    }


@pytest.fixture
def app(app_config):
    """Create and configure a test Flask application instance."""
    from web3auth.factory import create_app

    flask_app = create_app(app_config)
    flask_app.config.update({"TESTING": True})

    with flask_app.app_context():
        yield flask_app


@pytest.fixture
def client(app):
    """Create a test client for the Flask application."""
    return app.test_client()


@pytest.fixture
def wallet():
    """Local account standing in for the user's embedded wallet."""
    return Account.from_key(SIGNER_KEY)


@pytest.fixture
def other_wallet():
    return Account.from_key(OTHER_KEY)


@pytest.fixture
def sign():
    """The ``sign_text`` helper, as a fixture."""
    return sign_text


@pytest.fixture
def signed_message(wallet):
    """(message, signature) pair produced by ``wallet``."""
    return TEST_MESSAGE, sign_text(TEST_MESSAGE)


@pytest.fixture
def zero_signature():
    return "0x" + "0" * 130


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Add 'unit' marker to tests in unit/ directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add 'integration' marker to tests in integration/ directory
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
