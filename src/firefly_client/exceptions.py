"""Exception classes raised by the Firefly client.

Every public operation either returns a typed value or raises exactly one
of the errors defined here. Callers are expected to match on the class.
"""

from typing import Optional


class FireflyClientError(Exception):
    """Base exception for all Firefly client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(FireflyClientError):
    """Exception raised for invalid or missing construction input."""

    pass


class AuthenticationError(FireflyClientError):
    """Exception raised when the login exchange is rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message, status_code=status_code, details=body or None)
        self.body = body


class NotFoundError(FireflyClientError):
    """Exception raised when the target resource does not exist.

    Produced both by HTTP 404 on a single-item fetch and by list-based
    lookups that do not contain the requested identifier.
    """

    def __init__(
        self,
        resource: str,
        identifier: str,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(
            f"{resource} not found: {identifier}",
            status_code=status_code,
            details=body or None,
        )
        self.resource = resource
        self.identifier = identifier
        self.body = body


class ApiRequestError(FireflyClientError):
    """Exception raised for any other non-success HTTP status."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message, status_code=status_code, details=body or None)
        self.body = body


class DecodingError(FireflyClientError):
    """Exception raised when a response body does not match its expected shape."""

    pass


class TransportError(FireflyClientError):
    """Exception raised when the underlying HTTP transport fails."""

    def __init__(self, message: str, user_guidance: Optional[str] = None):
        super().__init__(message)
        self.user_guidance = user_guidance


class NetworkConnectionError(TransportError):
    """Connection refused, reset or otherwise failed."""

    pass


class NetworkTimeoutError(TransportError):
    """Connect, read, write or pool timeout."""

    pass


class DNSResolutionError(TransportError):
    """Server hostname could not be resolved."""

    pass


class SSLCertificateError(TransportError):
    """TLS handshake or certificate verification failed."""

    pass
