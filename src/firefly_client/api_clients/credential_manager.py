"""Bearer token management for the Firefly API.

The Firefly API issues short-lived access tokens in exchange for an
access key and secret key. ``CredentialManager`` performs that exchange
lazily, caches the token together with its expiry, and logs in again once
the token is about to expire.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from ..exceptions import AuthenticationError, DecodingError
from .flexible import FireflyModel, decode_json
from .network_error_handler import classify_transport_error

logger = logging.getLogger(__name__)

LOGIN_PATH = "/v2/login"
DEFAULT_EXPIRY_SKEW_SECONDS = 5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AccessToken:
    """A bearer token and the instant it stops being valid."""

    token: str
    expires_at: datetime
    token_type: str = "Bearer"

    def is_valid(self, now: datetime, skew: timedelta = timedelta(0)) -> bool:
        """Return True if the token can still be used at ``now``."""
        return now < self.expires_at - skew


class LoginResponse(FireflyModel):
    """Response body of ``POST /v2/login``."""

    access_token: str
    expires_at: int
    token_type: str = "Bearer"


class CredentialManager:
    """Lazily acquires and caches the bearer token for one client.

    The cached ``AccessToken`` is immutable and replaced by a single
    reference assignment, so readers never observe a token paired with
    another login's expiry. Callers holding a valid token never block;
    concurrent callers that find the token expired share one login.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        http_client: httpx.Client,
        login_url: str,
        user_agent: str,
        expiry_skew_seconds: float = DEFAULT_EXPIRY_SKEW_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the credential manager.

        Args:
            access_key: Firefly access key
            secret_key: Firefly secret key
            http_client: Transport used for the login exchange
            login_url: Absolute URL of the login endpoint
            user_agent: Identifying User-Agent value
            expiry_skew_seconds: Treat tokens as expired this long before
                their nominal expiry
            clock: Returns the current UTC time; defaults to the wall clock
        """
        self._access_key = access_key
        self._secret_key = secret_key
        self._http_client = http_client
        self._login_url = login_url
        self._user_agent = user_agent
        self._skew = timedelta(seconds=expiry_skew_seconds)
        self._clock = clock or _utc_now

        self._token: Optional[AccessToken] = None
        self._login_lock = threading.Lock()

    @property
    def current_token(self) -> Optional[AccessToken]:
        """The cached token, or None before the first login."""
        return self._token

    def _is_usable(self, token: Optional[AccessToken]) -> bool:
        return token is not None and token.is_valid(self._clock(), self._skew)

    def ensure_authenticated(self) -> AccessToken:
        """Return a valid access token, logging in if necessary.

        Returns:
            AccessToken valid at the time of the call

        Raises:
            AuthenticationError: If the login exchange is rejected
            DecodingError: If the login response is malformed
            TransportError: If the login request could not be sent
        """
        token = self._token
        if self._is_usable(token):
            return token

        with self._login_lock:
            # Another caller may have logged in while we waited
            token = self._token
            if self._is_usable(token):
                return token

            token = self._login()
            self._token = token
            return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call logs in again."""
        self._token = None

    def _login(self) -> AccessToken:
        logger.debug(f"Logging in to {self._login_url}")
        try:
            response = self._http_client.post(
                self._login_url,
                json={"accessKey": self._access_key, "secretKey": self._secret_key},
                headers={"User-Agent": self._user_agent},
            )
        except httpx.TransportError as e:
            raise classify_transport_error(e) from e

        try:
            if response.status_code != 200:
                body = response.content.decode("utf-8", errors="replace")
                logger.warning(f"Login failed with status {response.status_code}")
                raise AuthenticationError(
                    f"Authentication failed with status {response.status_code}",
                    status_code=response.status_code,
                    body=body,
                )
            login = decode_json(response.content, LoginResponse)
        finally:
            response.close()

        try:
            expires_at = datetime.fromtimestamp(login.expires_at, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise DecodingError(
                "Login response has an invalid expiresAt", details=str(e)
            ) from e

        logger.debug(f"Obtained access token valid until {expires_at.isoformat()}")
        return AccessToken(
            token=login.access_token,
            expires_at=expires_at,
            token_type=login.token_type or "Bearer",
        )
