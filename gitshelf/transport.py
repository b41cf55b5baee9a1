"""
Async HTTP transport for gitshelf.

One ``httpx.AsyncClient`` per backend instance. Adds the token in the
backend's header dialect, caps the number of requests in flight, retries
reads only when asked to, and turns error statuses into typed exceptions.
"""

import asyncio
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from gitshelf.dialects import BackendDialect
from gitshelf.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitShelfError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from gitshelf.logging import get_logger, log_http_request, log_http_response

logger = get_logger("http")

AuthInvalidCallback = Callable[[AuthenticationError], None]

_WRITE_METHODS = frozenset({"PUT", "POST", "DELETE", "PATCH"})

# Statuses that map to one exception regardless of method
_STATUS_ERRORS: dict[int, tuple[type[GitShelfError], str]] = {
    403: (AuthorizationError, "FORBIDDEN"),
    404: (NotFoundError, "NOT_FOUND"),
    409: (ConflictError, "CONFLICT"),
}

DEFAULT_RATE_LIMIT_WAIT = 60

# Fragments of 422 messages that report a stale sha or an occupied path
_CONFLICT_HINTS = ("sha", "already exists", "does not match")


@dataclass
class RetryConfig:
    """Opt-in retries for reads.

    Only GET requests are ever retried. Writes are compare-and-swap
    operations and are always left to the caller.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # seconds
    jitter: float = 0.1  # fraction of the delay, applied both ways


class AsyncHTTPTransport:
    """
    HTTP layer shared by every repository on one backend instance.

    Handles:
    - Token authentication in the backend's header dialect
    - A cap on requests in flight across all callers
    - Exponential backoff with jitter for opt-in read retries
    - Mapping error statuses to GitShelfError subclasses
    - Telling the host when the token stops being accepted
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        dialect: BackendDialect,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        max_concurrency: int = 8,
        on_auth_invalid: AuthInvalidCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: API root (e.g., "https://api.github.com")
            token: Personal access token
            dialect: REST conventions of the backend
            timeout: Request timeout in seconds
            retry_config: Retry behavior for reads (default: none)
            max_concurrency: Maximum number of requests in flight
            on_auth_invalid: Called whenever the backend answers 401
            transport: httpx transport override (used by tests)
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.base_url = base_url.rstrip("/")
        self.dialect = dialect
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.on_auth_invalid = on_auth_invalid
        self._semaphore = asyncio.Semaphore(max_concurrency)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Authorization": dialect.auth_header(token),
                "Accept": dialect.accept,
            },
            # GitHub answers 301 for renamed repositories
            follow_redirects=True,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send a request and decode the JSON answer.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters
            body: JSON request body (DELETE carries one on all backends)

        Returns:
            Decoded JSON, or an empty dict for an empty body

        Raises:
            GitShelfError: On error statuses and connection failures
        """
        method = method.upper()
        attempt = 0

        while True:
            try:
                response = await self._send(method, path, params, body)
            except httpx.RequestError as e:
                if method != "GET" or attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                delay = self._get_backoff_time(attempt, None)
                logger.info("Retrying %s %s after %s in %.2fs", method, path, type(e).__name__, delay)
            else:
                if response.status_code < 400:
                    return self._parse_body(response, method)

                error = self._parse_error_response(response, method)
                if isinstance(error, AuthenticationError):
                    self._notify_auth_invalid(error)
                if not self._should_retry(response.status_code, attempt, method):
                    raise error
                delay = self._get_backoff_time(attempt, response.headers.get("Retry-After"))
                logger.info(
                    "Retrying %s %s after HTTP %d in %.2fs",
                    method, path, response.status_code, delay,
                )

            await asyncio.sleep(delay)
            attempt += 1

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        body: dict[str, Any] | None,
    ) -> httpx.Response:
        log_http_request(method, path, body=body)
        started = time.perf_counter()
        async with self._semaphore:
            response = await self._client.request(method, path, params=params, json=body)
        log_http_response(response.status_code, path, elapsed_ms=(time.perf_counter() - started) * 1000)
        return response

    def _notify_auth_invalid(self, error: AuthenticationError) -> None:
        logger.warning("Access token rejected by %s", self.dialect.name)
        if self.on_auth_invalid is not None:
            self.on_auth_invalid(error)

    def _should_retry(self, status_code: int, attempt: int, method: str = "GET") -> bool:
        """Whether a failed attempt (0-indexed) gets another go."""
        return (
            method == "GET"
            and attempt < self.retry_config.max_retries
            and status_code in self.retry_config.retry_on
        )

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Seconds to wait before the next attempt.

        A numeric Retry-After header wins when ``respect_retry_after`` is
        set. Otherwise ``backoff_factor ** attempt``, moved by up to
        ``jitter`` either way and capped at ``max_backoff``.
        """
        config = self.retry_config
        if retry_after and config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                logger.debug("Ignoring non-numeric Retry-After %r", retry_after)

        delay = config.backoff_factor ** attempt
        delay += random.uniform(-1.0, 1.0) * delay * config.jitter
        return min(delay, config.max_backoff)

    def _parse_body(self, response: httpx.Response, method: str) -> Any:
        """
        Decode a successful response.

        Write endpoints answer with differently shaped bodies on each
        backend (sometimes none at all); they are only ever read as
        "succeeded", so an empty or unparsable write body becomes {}.
        """
        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            if method in _WRITE_METHODS:
                return {}
            raise ServerError(
                "INVALID_RESPONSE",
                f"Could not decode response from {response.request.url}",
                response.status_code,
            ) from e

    def _parse_error_response(self, response: httpx.Response, method: str = "GET") -> GitShelfError:
        """
        Map an error response to an exception.

        429, and 403 with an exhausted rate budget, are RateLimitedError.
        On writes 409 is a ConflictError, and so is 422 when its message
        reports a stale sha or an existing file. Other 422s, and 422 on
        reads, are ordinary client errors.
        """
        status = response.status_code
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}
        message = data.get("message") or data.get("error") or f"HTTP {status}"

        if status == 401:
            return AuthenticationError("UNAUTHORIZED", f"Token expired or invalid: {message}", status)
        if status == 429 or (status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"):
            try:
                retry_after = int(response.headers.get("Retry-After", DEFAULT_RATE_LIMIT_WAIT))
            except ValueError:
                retry_after = DEFAULT_RATE_LIMIT_WAIT
            return RateLimitedError("RATE_LIMITED", message, retry_after, status)
        if method in _WRITE_METHODS and self._is_write_conflict(status, message):
            return ConflictError("CONFLICT", message, status)
        if status in _STATUS_ERRORS:
            error_class, code = _STATUS_ERRORS[status]
            return error_class(code, message, status)
        if status >= 500:
            return ServerError("SERVER_ERROR", message, status)
        return ValidationError("BAD_REQUEST", message, status)

    def _is_write_conflict(self, status: int, message: str) -> bool:
        if status not in self.dialect.write_conflict_statuses:
            return False
        if status == 409:
            return True
        lowered = message.lower()
        return any(hint in lowered for hint in _CONFLICT_HINTS)


__all__ = [
    "AsyncHTTPTransport",
    "AuthInvalidCallback",
    "RetryConfig",
]
