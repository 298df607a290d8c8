"""Platform API connectors.

Re-exports the BaseConnector transport, the exception hierarchy, and the
DatasourceConnector for convenient imports.
"""

from .base import (
    BaseConnector,
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
from .datasources import DatasourceConnector

__all__ = [
    # Base
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
    # Datasources
    "DatasourceConnector",
]
