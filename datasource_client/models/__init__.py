"""Pydantic models for datasource configurations, entities and envelopes."""

from .configs import (
    CONFIG_VARIANTS,
    BasicAuthConfig,
    DatasourceConfig,
    EsConfig,
    GoogleSheetsConfig,
    HttpConfig,
    InheritedOAuthConfig,
    KeyValue,
    MongoConfig,
    NoAuthConfig,
    OAuthBasicConfig,
    OAuthConfig,
    OracleConfig,
    SQLConfig,
    SSLConfig,
    WireModel,
    config_model_for,
    parse_config,
)
from .datasource import (
    DataSourceTypeInfo,
    Datasource,
    DatasourceColumn,
    DatasourceInfo,
    DatasourceStructure,
    DatasourceTable,
    DatasourceTestResult,
    NodePluginDatasourceInfo,
)
from .envelope import ApiResponse

__all__ = [
    "CONFIG_VARIANTS",
    "ApiResponse",
    "BasicAuthConfig",
    "DataSourceTypeInfo",
    "Datasource",
    "DatasourceColumn",
    "DatasourceConfig",
    "DatasourceInfo",
    "DatasourceStructure",
    "DatasourceTable",
    "DatasourceTestResult",
    "EsConfig",
    "GoogleSheetsConfig",
    "HttpConfig",
    "InheritedOAuthConfig",
    "KeyValue",
    "MongoConfig",
    "NoAuthConfig",
    "NodePluginDatasourceInfo",
    "OAuthBasicConfig",
    "OAuthConfig",
    "OracleConfig",
    "SQLConfig",
    "SSLConfig",
    "WireModel",
    "config_model_for",
    "parse_config",
]
