"""Firefly Client - typed Python client for the Firefly cloud-governance API.

Wraps projects, variable sets, runner workspaces, guardrails, governance
policies and backup-and-DR policies behind synchronous CRUD operations.
"""

__version__ = "1.0.0"
__author__ = "Firefly Client Team"

from .api_clients import FireflyAPIClient  # noqa: E402
from .config import ClientConfig, load_config  # noqa: E402
from .exceptions import (  # noqa: E402
    ApiRequestError,
    AuthenticationError,
    ConfigurationError,
    DecodingError,
    FireflyClientError,
    NotFoundError,
    TransportError,
)

__all__ = [
    "FireflyAPIClient",
    "ClientConfig",
    "load_config",
    "FireflyClientError",
    "ConfigurationError",
    "AuthenticationError",
    "NotFoundError",
    "ApiRequestError",
    "DecodingError",
    "TransportError",
]
