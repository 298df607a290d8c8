"""Datasource configuration model and async access client.

Re-exports the entity models, configuration variants, checks, connector and
exception hierarchy for convenient imports::

    from datasource_client import Datasource, DatasourceConnector, MongoConfig
"""

from .connectors import DatasourceConnector
from .core.enums import (
    AuthType,
    DatasourceType,
    HttpOAuthGrantType,
    ProbeErrorKind,
    SSLCertVerification,
    StructureKind,
)
from .core.exceptions import (
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
from .models import (
    BasicAuthConfig,
    Datasource,
    DatasourceInfo,
    DatasourceStructure,
    DataSourceTypeInfo,
    EsConfig,
    GoogleSheetsConfig,
    HttpConfig,
    KeyValue,
    MongoConfig,
    NodePluginDatasourceInfo,
    OAuthBasicConfig,
    OAuthConfig,
    OracleConfig,
    SQLConfig,
    SSLConfig,
)
from .quality.checks import collect_config_issues, is_valid_config, validate_config

__all__ = [
    # Connector
    "DatasourceConnector",
    # Enums
    "AuthType",
    "DatasourceType",
    "HttpOAuthGrantType",
    "ProbeErrorKind",
    "SSLCertVerification",
    "StructureKind",
    # Errors
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
    # Models
    "BasicAuthConfig",
    "Datasource",
    "DatasourceInfo",
    "DatasourceStructure",
    "DataSourceTypeInfo",
    "EsConfig",
    "GoogleSheetsConfig",
    "HttpConfig",
    "KeyValue",
    "MongoConfig",
    "NodePluginDatasourceInfo",
    "OAuthBasicConfig",
    "OAuthConfig",
    "OracleConfig",
    "SQLConfig",
    "SSLConfig",
    # Checks
    "collect_config_issues",
    "is_valid_config",
    "validate_config",
]
