"""Classification of httpx transport failures into client errors.

httpx raises a family of ``TransportError`` subclasses whose messages come
from the operating system or the TLS stack. This module maps them onto the
client's ``TransportError`` hierarchy and attaches troubleshooting text the
CLI can show to users.
"""

import logging
import re
from typing import List

import httpx

from ..exceptions import (
    DNSResolutionError,
    NetworkConnectionError,
    NetworkTimeoutError,
    SSLCertificateError,
    TransportError,
)

logger = logging.getLogger(__name__)

_DNS_ERROR_PATTERNS = [
    r"name.*resolution.*failed",
    r"name.*or.*service.*not.*known",
    r"nodename.*nor.*servname.*provided",
    r"temporary.*failure.*in.*name.*resolution",
    r"getaddrinfo.*failed",
]

_SSL_ERROR_PATTERNS = [
    r"ssl.*certificate.*verification.*failed",
    r"certificate.*verify.*failed",
    r"ssl.*handshake.*failed",
    r"bad.*certificate",
]

_CONNECTION_ERROR_PATTERNS = [
    r"connection.*refused",
    r"connection.*reset",
    r"network.*is.*unreachable",
    r"no.*route.*to.*host",
]


def _format_guidance(error_type: str, steps: List[str]) -> str:
    lines = [f"{error_type}:"]
    lines.extend(f"  {i}. {step}" for i, step in enumerate(steps, 1))
    return "\n".join(lines)


def _matches(patterns: List[str], message: str) -> bool:
    return any(re.search(pattern, message) for pattern in patterns)


def _classify_connect_error(message: str) -> TransportError:
    if _matches(_DNS_ERROR_PATTERNS, message):
        return DNSResolutionError(
            "Cannot resolve server address. Check your internet connection and API URL.",
            user_guidance=_format_guidance(
                "DNS Resolution Error",
                [
                    "Verify the API URL is spelled correctly",
                    "Check your DNS settings and network connection",
                ],
            ),
        )

    if _matches(_SSL_ERROR_PATTERNS, message):
        return SSLCertificateError(
            "SSL certificate verification failed. Server may be using invalid certificate.",
            user_guidance=_format_guidance(
                "SSL Certificate Error",
                [
                    "Verify the API URL uses the correct hostname",
                    "Check that your system certificate store is up to date",
                ],
            ),
        )

    if _matches(_CONNECTION_ERROR_PATTERNS, message):
        return NetworkConnectionError(
            "Cannot connect to server. Check if the API endpoint is reachable.",
            user_guidance=_format_guidance(
                "Network Connection Error",
                [
                    "Check your network connection",
                    "Verify that a proxy or firewall is not blocking the request",
                ],
            ),
        )

    return NetworkConnectionError(f"Connection failed: {message}")


def classify_transport_error(error: httpx.TransportError) -> TransportError:
    """Map an httpx transport exception to a client ``TransportError``.

    Args:
        error: The exception raised by httpx while sending a request

    Returns:
        The matching ``TransportError`` subclass. The caller raises it
        with ``from error`` so the original exception stays attached.
    """
    message = str(error).lower()

    if isinstance(error, httpx.TimeoutException):
        if isinstance(error, httpx.ConnectTimeout):
            text = "Connection timed out. Check your network connection or try again later."
        else:
            text = "Request timed out. Check your network connection or try again later."
        classified: TransportError = NetworkTimeoutError(
            text,
            user_guidance=_format_guidance(
                "Network Timeout Error",
                [
                    "Try again - this may be a temporary issue",
                    "Consider increasing the client timeout if the problem persists",
                ],
            ),
        )
    elif isinstance(error, httpx.ConnectError):
        classified = _classify_connect_error(message)
    elif isinstance(error, httpx.NetworkError):
        classified = NetworkConnectionError(f"Network error: {error}")
    else:
        classified = TransportError(f"Transport error: {error}")

    logger.debug(f"Classified {type(error).__name__} as {type(classified).__name__}")
    return classified
