"""Prometheus metrics shared by the blueprints."""

from prometheus_client import CollectorRegistry, Counter, Histogram

registry = CollectorRegistry()

request_counter = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=registry,
)
verification_counter = Counter(
    "signature_verifications_total",
    "Signature verification verdicts",
    ["result"],
    registry=registry,
)
verification_seconds = Histogram(
    "signature_verification_seconds",
    "Time spent recovering signers",
    registry=registry,
)
