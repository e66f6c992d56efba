"""In-process Firefly API double for client tests.

Requests are routed by method and raw (still percent-encoded) path to
handler functions registered by each test. Every request and response is
recorded so tests can assert on what the client actually sent.
"""

import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from firefly_client.api_clients import FireflyAPIClient

BASE_URL = "https://firefly.test"
LOGIN_PATH = "/v2/login"
TEST_ACCESS_KEY = "test-access"
TEST_SECRET_KEY = "test-secret"

Handler = Callable[[httpx.Request], httpx.Response]


def raw_path(request: httpx.Request) -> str:
    """Percent-encoded path of a request, without the query string."""
    return request.url.raw_path.decode("ascii").split("?", 1)[0]


class MockControlPlane:
    """Routes httpx requests to per-test handlers and records traffic."""

    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url
        self.requests: List[httpx.Request] = []
        self.responses: List[httpx.Response] = []
        self._handlers: Dict[Tuple[str, str], Handler] = {}
        self._lock = threading.Lock()

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        """Register ``handler`` for ``method`` on the encoded ``path``."""
        self._handlers[(method.upper(), path)] = handler

    def add_json(
        self,
        method: str,
        path: str,
        payload: Any = None,
        status_code: int = 200,
    ) -> None:
        """Answer ``method path`` with a fixed JSON payload (or no body)."""

        def handle(request: httpx.Request) -> httpx.Response:
            if payload is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=payload)

        self.add_handler(method, path, handle)

    def add_login(
        self,
        token: str = "test-token",
        expires_in: int = 3600,
        status_code: int = 200,
        body: str = "invalid credentials",
        delay: float = 0.0,
    ) -> None:
        """Register the login exchange.

        Args:
            token: Access token handed out on success
            expires_in: Seconds from now until the token expires; negative
                values hand out already expired tokens
            status_code: Non-200 values make login fail with ``body``
            body: Response text for failed logins
            delay: Seconds to wait before answering
        """

        def handle(request: httpx.Request) -> httpx.Response:
            if delay:
                time.sleep(delay)
            if status_code != 200:
                return httpx.Response(status_code, text=body)
            return httpx.Response(
                200,
                json={
                    "accessToken": token,
                    "expiresAt": int(time.time()) + expires_in,
                    "tokenType": "Bearer",
                },
            )

        self.add_handler("POST", LOGIN_PATH, handle)

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)

        handler = self._handlers.get((request.method, raw_path(request)))
        if handler is None:
            response = httpx.Response(
                404, json={"message": f"no route for {request.method} {raw_path(request)}"}
            )
        else:
            response = handler(request)

        with self._lock:
            self.responses.append(response)
        return response

    def requests_to(self, method: str, path: str) -> List[httpx.Request]:
        """Recorded requests for ``method`` on the encoded ``path``."""
        return [r for r in self.requests if r.method == method and raw_path(r) == path]

    @property
    def login_count(self) -> int:
        return len(self.requests_to("POST", LOGIN_PATH))

    @property
    def api_requests(self) -> List[httpx.Request]:
        """Recorded requests other than the login exchange."""
        return [r for r in self.requests if raw_path(r) != LOGIN_PATH]

    @property
    def all_responses_closed(self) -> bool:
        return all(response.is_closed for response in self.responses)

    def http_client(self) -> httpx.Client:
        """An httpx client whose transport is this control plane."""
        return httpx.Client(transport=httpx.MockTransport(self._dispatch), timeout=30.0)

    def create_client(self, http_client: Optional[httpx.Client] = None, **kwargs) -> FireflyAPIClient:
        """A ``FireflyAPIClient`` pointed at this control plane."""
        return FireflyAPIClient(
            TEST_ACCESS_KEY,
            TEST_SECRET_KEY,
            endpoint=self.base_url,
            http_client=http_client or self.http_client(),
            **kwargs,
        )
