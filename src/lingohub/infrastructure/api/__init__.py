"""Client for the Lingohub distribution API."""

from lingohub.infrastructure.api.client import BASE_URL, DEFAULT_TIMEOUT, APIClient
from lingohub.infrastructure.api.endpoints import (
    CHECK_PATH,
    Endpoint,
    HTTPMethod,
    check_endpoint,
    model_decoder,
)

__all__ = [
    "APIClient",
    "BASE_URL",
    "CHECK_PATH",
    "DEFAULT_TIMEOUT",
    "Endpoint",
    "HTTPMethod",
    "check_endpoint",
    "model_decoder",
]
