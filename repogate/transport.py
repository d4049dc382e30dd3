"""
HTTP Transport for the repogate signing client.

Handles HTTP communication with retry logic and error handling. Only
idempotent commands are resent after the server answered; state-changing
commands are resent only when the server never saw them.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from repogate.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RepoGateError,
    ServerError,
    ValidationError,
)
from repogate.logging import log_http_request, log_http_response

# Failures raised before the request reached the server
_UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)

# Rejected before processing, so safe to resend for any command
_RATE_LIMITED = 429


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # seconds
    jitter: float = 0.1  # 0.1 = ±10%


class HTTPTransport:
    """
    HTTP transport layer with retry logic.

    Handles:
    - Exponential backoff with jitter between attempts
    - Retry-After header for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL of the search server (e.g., "http://localhost:8080")
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=http_transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get(
        self,
        path: str,
        params: dict[str, str] | None = None,
        idempotent: bool = True,
    ) -> dict[str, Any]:
        """
        Send a GET request, retrying where it is safe.

        Args:
            path: API path (e.g., "/api/repo/list/")
            params: Query parameters
            idempotent: False for requests that change server state; those
                are resent only on connection failures and 429 responses

        Returns:
            Parsed JSON response

        Raises:
            RepoGateError: On API errors
        """
        request = self._client.build_request("GET", path, params=params)

        def send() -> httpx.Response:
            log_http_request(request.method, str(request.url))
            started = time.monotonic()
            response = self._client.send(request)
            log_http_response(
                response.status_code,
                str(request.url),
                (time.monotonic() - started) * 1000,
            )
            return response

        return self._execute_with_retry(send, idempotent)

    def _execute_with_retry(
        self, send: Callable[[], httpx.Response], idempotent: bool = True
    ) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                response = send()
            except httpx.RequestError as e:
                if not self._may_resend(e, attempt, idempotent):
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                time.sleep(self._get_backoff_time(attempt, None))
                attempt += 1
                continue

            if response.status_code < 400:
                return response.json()

            error = self._parse_error_response(response)
            if not self._should_retry(response.status_code, attempt, idempotent):
                raise error

            time.sleep(self._get_backoff_time(attempt, response.headers.get("Retry-After")))
            attempt += 1

    def _may_resend(self, error: httpx.RequestError, attempt: int, idempotent: bool) -> bool:
        """Whether a request that failed at the network level may be sent again."""
        if attempt >= self.retry_config.max_retries:
            return False
        return idempotent or isinstance(error, _UNSENT_ERRORS)

    def _should_retry(self, status_code: int, attempt: int, idempotent: bool = True) -> bool:
        """
        Determine if a request that got an error status should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)
            idempotent: Whether resending cannot repeat a side effect
        """
        if attempt >= self.retry_config.max_retries:
            return False
        if status_code not in self.retry_config.retry_on:
            return False
        return idempotent or status_code == _RATE_LIMITED

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Seconds to wait before the next attempt.

        A numeric Retry-After header wins when respect_retry_after is set;
        otherwise backoff_factor ** attempt, jittered and capped at max_backoff.
        """
        config = self.retry_config
        if retry_after and config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        base_wait = config.backoff_factor ** attempt
        spread = base_wait * config.jitter
        return min(base_wait + random.uniform(-spread, spread), config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> RepoGateError:
        """Map an error response to the matching RepoGateError subclass."""
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"

        if status_code in (401, 403):
            return AuthenticationError(message)
        if status_code == 404:
            return NotFoundError(message)
        if status_code == 409:
            return ConflictError(message)
        if status_code == _RATE_LIMITED:
            return ServerError("RATE_LIMITED", message)
        if status_code >= 500:
            return ServerError("SERVER_ERROR", message)
        return ValidationError(message)
