"""Web3 auth signing service: personal_sign verification over HTTP."""

__version__ = "1.0.0"
