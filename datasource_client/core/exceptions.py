"""Exception hierarchy for the datasource client.

- ConnectorError: base for all errors raised by this package
- ConfigValidationError: configuration fails the connector's field rules
- NotFoundError: unknown datasource, organization or app
- ConflictError: name or uniqueness violation
- RequestTimeoutError: call exceeded its deadline
- DatasourceConnectionError: the probed system refused or failed the session
- UpstreamError: platform or connector plugin failed for an opaque reason
- RateLimitError: the platform returned HTTP 429
- DataParsingError: response payload does not match the expected model
- FetchError: transport failure reaching the platform
"""

from __future__ import annotations

from typing import Any, Optional


class ConnectorError(Exception):
    """Base exception for all datasource client errors."""

    def __init__(
        self,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class ConfigValidationError(ConnectorError):
    """Raised when a configuration does not match its connector's shape.

    ``issues`` lists ``{"field", "issue", "message"}`` dicts; it holds a single
    entry when the rejection came from the platform.
    """

    def __init__(
        self,
        message: str = "",
        *,
        issues: Optional[list[dict[str, Any]]] = None,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, code=code)
        self.issues = issues or []


class NotFoundError(ConnectorError):
    """Raised when the addressed datasource, organization or app is unknown."""


class ConflictError(ConnectorError):
    """Raised when a name or uniqueness constraint is violated."""


class RequestTimeoutError(ConnectorError, TimeoutError):
    """Raised when a call exceeds its allotted deadline."""


class DatasourceConnectionError(ConnectorError, ConnectionError):
    """Raised when a probed datasource could not establish a working session."""


class UpstreamError(ConnectorError):
    """Raised when the platform or a connector plugin fails opaquely."""


class RateLimitError(ConnectorError):
    """Raised when the API returns a 429 rate limit response."""


class DataParsingError(ConnectorError):
    """Raised when response data cannot be parsed into the expected format."""


class FetchError(ConnectorError):
    """Raised when an HTTP request fails after all retry attempts."""
