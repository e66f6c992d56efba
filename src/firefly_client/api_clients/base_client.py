"""Firefly API client core.

Owns the base endpoint, the HTTP transport and the credential manager.
Builds authenticated requests for the service facades and classifies
their responses into typed values or client exceptions.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Collection, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from ..config import ClientConfig
from ..exceptions import ApiRequestError, ConfigurationError, NotFoundError
from ..url_validator import validate_and_normalize_endpoint
from .backup_and_dr_client import BackupAndDRService
from .credential_manager import (
    DEFAULT_EXPIRY_SKEW_SECONDS,
    LOGIN_PATH,
    CredentialManager,
)
from .flexible import FireflyModel, decode_json
from .governance_policies_client import GovernancePoliciesService
from .guardrails_client import GuardrailsService
from .network_error_handler import classify_transport_error
from .paths import with_query
from .projects_client import ProjectsService
from .runners_workspaces_client import RunnersWorkspacesService
from .variable_sets_client import VariableSetsService
from .workspaces_client import WorkspacesService

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "firefly-python-client"
DEFAULT_TIMEOUT = 30.0

ExpectedStatus = Union[int, Collection[int]]


def _encode_body(body: Any) -> Any:
    if isinstance(body, FireflyModel):
        return body.to_payload()
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(body, (list, tuple)):
        return [_encode_body(item) for item in body]
    if isinstance(body, dict):
        return {key: _encode_body(value) for key, value in body.items()}
    return body


def _body_text(response: httpx.Response) -> str:
    return response.content.decode("utf-8", errors="replace")


class FireflyAPIClient:
    """Synchronous client for the Firefly API.

    Construction validates input and performs no network traffic. The
    first call that needs authentication logs in; the token is then
    reused until it expires.

    Example:
        >>> with FireflyAPIClient("key", "secret") as client:
        ...     page = client.projects.list(page_size=10, offset=0)
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        endpoint: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        expiry_skew_seconds: float = DEFAULT_EXPIRY_SKEW_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the Firefly API client.

        Args:
            access_key: Firefly access key
            secret_key: Firefly secret key
            endpoint: Base URL of the API (default: production endpoint)
            http_client: Transport to use; a client with ``timeout`` is
                created when omitted
            user_agent: Value of the User-Agent header on every request
            timeout: Per-call timeout for the default transport, in seconds
            expiry_skew_seconds: Re-login this long before token expiry
            clock: Current UTC time source for token expiry checks

        Raises:
            ConfigurationError: If a credential is empty or the endpoint
                is malformed
        """
        if not access_key:
            raise ConfigurationError("access_key cannot be empty")
        if not secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        self.base_url = validate_and_normalize_endpoint(endpoint)
        try:
            self._base = httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid endpoint URL: {endpoint}", details=str(e)) from e

        self.user_agent = user_agent
        self._owns_http_client = http_client is None
        self._http_client = http_client if http_client is not None else httpx.Client(timeout=timeout)

        self.credentials = CredentialManager(
            access_key=access_key,
            secret_key=secret_key,
            http_client=self._http_client,
            login_url=self.resolve_url(LOGIN_PATH),
            user_agent=user_agent,
            expiry_skew_seconds=expiry_skew_seconds,
            clock=clock,
        )

        self.projects = ProjectsService(self)
        self.variable_sets = VariableSetsService(self)
        self.runners_workspaces = RunnersWorkspacesService(self)
        self.workspaces = WorkspacesService(self)
        self.guardrails = GuardrailsService(self)
        self.governance_policies = GovernancePoliciesService(self)
        self.backup_and_dr = BackupAndDRService(self)

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: Optional[httpx.Client] = None
    ) -> "FireflyAPIClient":
        """Create a client from a loaded ``ClientConfig``."""
        return cls(
            access_key=config.access_key,
            secret_key=config.secret_key,
            endpoint=config.api_url,
            http_client=http_client,
            timeout=config.timeout,
        )

    def resolve_url(self, path: str) -> str:
        """Resolve a relative path against the base endpoint."""
        return str(self._base.join(path))

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        """Build an unauthenticated request.

        Args:
            method: HTTP method
            path: Path relative to the base endpoint, optionally with a
                query string. Identifiers must already be percent-encoded.
            body: Optional model, list or dict serialized as JSON
            params: Query parameters; None and empty values are skipped

        Returns:
            httpx.Request ready for ``send``
        """
        url = self.resolve_url(with_query(path, params))
        if body is None:
            return self._http_client.build_request(method, url)
        return self._http_client.build_request(method, url, json=_encode_body(body))

    def send(self, request: httpx.Request) -> httpx.Response:
        """Authenticate and dispatch a request built by ``build_request``.

        Raises:
            AuthenticationError: If login fails; the request is not sent
            TransportError: If the request could not be delivered
        """
        token = self.credentials.ensure_authenticated()
        request.headers["Authorization"] = f"Bearer {token.token}"
        request.headers["User-Agent"] = self.user_agent

        logger.debug(f"{request.method} {request.url}")
        try:
            return self._http_client.send(request)
        except httpx.TransportError as e:
            raise classify_transport_error(e) from e

    def classify_response(
        self,
        response: httpx.Response,
        expected_status: ExpectedStatus,
        response_model: Any = None,
        decoder: Optional[Callable[[bytes], Any]] = None,
        not_found_id: Optional[str] = None,
        resource: str = "resource",
    ) -> Any:
        """Turn a response into a decoded value or a client exception.

        Args:
            response: Response returned by ``send``
            expected_status: Status code or codes that mean success
            response_model: Type to decode a successful body into
            decoder: Custom decoder for a successful body; takes precedence
                over ``response_model``
            not_found_id: Identifier of a single-item fetch. When set, a 404
                raises ``NotFoundError`` instead of ``ApiRequestError``.
            resource: Resource name used in error messages

        Returns:
            The decoded body, or None when no decoding was requested

        Raises:
            NotFoundError: On 404 for a single-item fetch
            ApiRequestError: On any other unexpected status
            DecodingError: If a successful body does not match
        """
        if isinstance(expected_status, int):
            expected_status = (expected_status,)

        try:
            status = response.status_code
            if status in expected_status:
                if decoder is not None:
                    return decoder(response.content)
                if response_model is not None:
                    return decode_json(response.content, response_model)
                return None

            body = _body_text(response)
            if status == 404 and not_found_id is not None:
                logger.debug(f"{resource} {not_found_id} not found")
                raise NotFoundError(resource, not_found_id, status_code=404, body=body)

            request = response.request
            logger.debug(f"{request.method} {request.url} returned {status}")
            raise ApiRequestError(
                f"{request.method} {request.url.path} failed with status {status}",
                status_code=status,
                body=body,
            )
        finally:
            response.close()

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        expected_status: ExpectedStatus = 200,
        response_model: Any = None,
        decoder: Optional[Callable[[bytes], Any]] = None,
        not_found_id: Optional[str] = None,
        resource: str = "resource",
    ) -> Any:
        """Build, send and classify one API call."""
        response = self.send(self.build_request(method, path, body, params))
        return self.classify_response(
            response,
            expected_status,
            response_model=response_model,
            decoder=decoder,
            not_found_id=not_found_id,
            resource=resource,
        )

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http_client:
            self._http_client.close()

    def __enter__(self) -> "FireflyAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
