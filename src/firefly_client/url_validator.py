"""Endpoint validation and normalization for the Firefly API."""

from typing import Optional
from urllib.parse import urlparse, urlunparse

from .exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.gofirefly.io"


def validate_and_normalize_endpoint(endpoint: Optional[str]) -> str:
    """Validate and normalize the base endpoint of the Firefly API.

    Args:
        endpoint: The endpoint URL, or None to use the production endpoint

    Returns:
        str: Absolute URL without a trailing slash

    Raises:
        ConfigurationError: If the URL is malformed or uses another protocol
    """
    if endpoint is None:
        return DEFAULT_API_URL

    endpoint = endpoint.strip()
    if not endpoint:
        return DEFAULT_API_URL

    # urlparse treats "host:port" as "scheme:path"
    initial_parsed = urlparse(endpoint)
    if not initial_parsed.scheme or (
        not initial_parsed.netloc and ":" in endpoint and "://" not in endpoint
    ):
        endpoint = f"https://{endpoint}"

    try:
        parsed = urlparse(endpoint)
        hostname = parsed.hostname or ""
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid endpoint URL: {endpoint}", details=str(e)) from e

    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(
            f"Unsupported protocol '{parsed.scheme}'. Only HTTP and HTTPS are supported"
        )

    if not parsed.netloc or parsed.netloc.startswith(".") or not hostname or port == 0:
        raise ConfigurationError(f"Invalid endpoint URL: {endpoint}")

    path = parsed.path.rstrip("/")

    return urlunparse(
        (parsed.scheme, parsed.netloc, path, parsed.params, parsed.query, parsed.fragment)
    )
