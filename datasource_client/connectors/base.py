"""Base connector infrastructure for platform API clients.

Provides the BaseConnector class with:
- Async HTTP client via httpx with connection pooling
- Per-call deadline bounding the whole call, queueing and retries included
- Retry with exponential backoff + jitter via tenacity, for reads only
- Concurrency limiting via asyncio.Semaphore
- Structured logging via structlog
- Response envelope unwrapping and HTTP status to exception mapping

Only GET requests are retried, and only when the connection could not be
established or the platform answered 429. Timeouts and writes are never
retried, so a call fails after exactly one deadline.

The exception hierarchy lives in ``datasource_client.core.exceptions`` and is
re-exported here.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ..core.config import settings
from ..core.exceptions import (
    ConfigValidationError,
    ConflictError,
    ConnectorError,
    DataParsingError,
    DatasourceConnectionError,
    FetchError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    UpstreamError,
)
from ..core.utils.logging_config import get_logger
from ..models.envelope import ApiResponse

__all__ = [
    "BaseConnector",
    "ConfigValidationError",
    "ConflictError",
    "ConnectorError",
    "DataParsingError",
    "DatasourceConnectionError",
    "FetchError",
    "NotFoundError",
    "RateLimitError",
    "RequestTimeoutError",
    "UpstreamError",
    "error_for_status",
]

_RETRYABLE_METHODS = frozenset({"GET", "HEAD"})

_STATUS_ERRORS: dict[int, type[ConnectorError]] = {
    400: ConfigValidationError,
    404: NotFoundError,
    408: RequestTimeoutError,
    409: ConflictError,
    422: ConfigValidationError,
    429: RateLimitError,
}

_ENVELOPE = TypeAdapter(ApiResponse[Any])
_ENVELOPE_KEYS = frozenset({"code", "success", "data"})


def error_for_status(
    status_code: int, message: str, code: Optional[int] = None
) -> ConnectorError:
    """Map an HTTP status (and envelope code) to the matching exception."""
    error_cls = _STATUS_ERRORS.get(status_code, UpstreamError)
    if error_cls is ConfigValidationError:
        return ConfigValidationError(
            message,
            issues=[{"field": None, "issue": "rejected", "message": message}],
            status_code=status_code,
            code=code,
        )
    return error_cls(message, status_code=status_code, code=code)


class BaseConnector:
    """Base class for clients of the platform API.

    Subclasses MUST override:
        SOURCE_NAME: str - identifier used in logs and error messages

    Subclasses MAY override:
        MAX_CONCURRENT_REQUESTS: int - cap on in-flight requests per connector
        MAX_RETRIES: int - attempts for retryable reads
        TIMEOUT_SECONDS: float - default per-request deadline

    Usage::

        async with MyConnector() as conn:
            data = await conn._call("GET", "v1/things")
    """

    # Subclasses MUST override
    SOURCE_NAME: str = ""

    # Subclasses MAY override
    MAX_CONCURRENT_REQUESTS: int = settings.max_concurrent_requests
    MAX_RETRIES: int = settings.max_retries
    TIMEOUT_SECONDS: float = settings.request_timeout_seconds

    # Backoff between retried reads (seconds)
    RETRY_INITIAL_WAIT: float = 1.0
    RETRY_MAX_WAIT: float = 30.0
    RETRY_JITTER: float = 5.0

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or settings.api_base_url
        self._headers = dict(headers or {})
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._semaphore = asyncio.Semaphore(max(1, self.MAX_CONCURRENT_REQUESTS))
        self.log = get_logger("connectors").bind(connector=self.SOURCE_NAME)

    async def __aenter__(self) -> "BaseConnector":
        """Create and configure the httpx async client."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            timeout=httpx.Timeout(self.TIMEOUT_SECONDS),
            limits=httpx.Limits(
                max_connections=settings.max_connections,
                max_keepalive_connections=settings.max_keepalive_connections,
            ),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        """Close the httpx async client if open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Return the active httpx client.

        Raises:
            ConnectorError: If the client has not been initialized via __aenter__.
        """
        if self._client is None:
            raise ConnectorError(
                f"{self.SOURCE_NAME}: HTTP client not initialized. "
                "Use 'async with connector:' context manager."
            )
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Concurrency-capped HTTP request with retry and deadline mapping.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: URL path relative to the API base URL.
            timeout: Wall-clock deadline in seconds for the whole call,
                including semaphore wait and retries; defaults to
                TIMEOUT_SECONDS.
            **kwargs: Additional arguments passed to httpx.AsyncClient.request.

        Returns:
            The httpx.Response object, whatever its status code.

        Raises:
            RequestTimeoutError: If the deadline is exceeded.
            RateLimitError: If the API keeps returning HTTP 429.
            FetchError: If the platform cannot be reached.
        """
        deadline = self.TIMEOUT_SECONDS if timeout is None else timeout
        try:
            # Wall-clock bound over queueing, every attempt and backoff sleeps;
            # httpx.Timeout stays as the per-phase limit inside it.
            async with asyncio.timeout(deadline):
                async with self._semaphore:
                    return await self._request_with_retry(
                        method, url, timeout=httpx.Timeout(deadline), **kwargs
                    )
        except (TimeoutError, httpx.TimeoutException) as exc:
            self.log.warning("http_timeout", method=method, url=url, timeout=deadline)
            raise RequestTimeoutError(
                f"{self.SOURCE_NAME}: {method} {url} exceeded {deadline}s deadline"
            ) from exc
        except httpx.TransportError as exc:
            self.log.warning("http_transport_error", method=method, url=url, error=str(exc))
            raise FetchError(f"{self.SOURCE_NAME}: {method} {url} failed: {exc}") from exc

    async def _request_with_retry(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Execute an HTTP request with tenacity retry logic.

        Uses AsyncRetrying so that instance attributes (MAX_RETRIES) are
        accessible at runtime rather than decoration time.

        Retries on: httpx.ConnectError, RateLimitError, for GET/HEAD only.
        """
        attempts = self.MAX_RETRIES if method.upper() in _RETRYABLE_METHODS else 1
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((httpx.ConnectError, RateLimitError)),
            stop=stop_after_attempt(max(1, attempts)),
            wait=wait_exponential_jitter(
                initial=self.RETRY_INITIAL_WAIT,
                max=self.RETRY_MAX_WAIT,
                jitter=self.RETRY_JITTER,
            ),
            reraise=True,
        ):
            with attempt:
                self.log.debug(
                    "http_request",
                    method=method,
                    url=url,
                    attempt=attempt.retry_state.attempt_number,
                )
                response = await self.client.request(method, url, **kwargs)
                if response.status_code == 429:
                    raise RateLimitError(
                        f"{self.SOURCE_NAME}: Rate limit exceeded (HTTP 429)",
                        status_code=429,
                    )
                return response

        # Should not be reached, but satisfies type checker
        raise FetchError(f"{self.SOURCE_NAME}: Request failed after retries")  # pragma: no cover

    def _unwrap(self, response: httpx.Response, adapter: TypeAdapter[Any]) -> Any:
        """Unwrap the response envelope and parse its payload.

        Raises:
            ConnectorError: Subclass matching the HTTP status, or
                UpstreamError when a 2xx envelope reports failure.
            DataParsingError: If the envelope or payload has the wrong shape.
        """
        try:
            body = response.json()
        except ValueError:
            body = None

        envelope: ApiResponse[Any] | None = None
        if isinstance(body, dict) and _ENVELOPE_KEYS & body.keys():
            try:
                envelope = _ENVELOPE.validate_python(body)
            except ValidationError:
                envelope = None

        if response.is_error:
            message = (envelope.message if envelope else "") or response.text or response.reason_phrase
            raise error_for_status(
                response.status_code, message, envelope.code if envelope else None
            )

        if envelope is None:
            raise DataParsingError(
                f"{self.SOURCE_NAME}: response to {response.request.method} "
                f"{response.request.url.path} is not an API envelope",
                status_code=response.status_code,
            )

        if not envelope.ok:
            raise UpstreamError(
                envelope.message or f"{self.SOURCE_NAME}: request reported failure",
                status_code=response.status_code,
                code=envelope.code,
            )

        try:
            return adapter.validate_python(envelope.data)
        except ValidationError as exc:
            raise DataParsingError(
                f"{self.SOURCE_NAME}: unexpected payload for "
                f"{response.request.url.path}: {exc.error_count()} error(s)",
                status_code=response.status_code,
            ) from exc

    async def _call(
        self,
        method: str,
        url: str,
        adapter: TypeAdapter[Any],
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> Any:
        """Issue a request and return its unwrapped, parsed payload."""
        response = await self._request(method, url, timeout=timeout, **kwargs)
        return self._unwrap(response, adapter)
