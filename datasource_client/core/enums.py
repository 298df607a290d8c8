"""Shared enumerations used across the configuration and entity models.

All enums use the (str, Enum) mixin pattern so their values are
serializable strings, identical to what the platform API sends and expects.
"""

from enum import Enum


class DatasourceType(str, Enum):
    """Built-in connector types.

    Plugin-provided connector types use free-form ids and are not listed here.
    """

    MYSQL = "mysql"
    POSTGRES = "postgres"
    MSSQL = "mssql"
    MARIADB = "mariadb"
    CLICKHOUSE = "clickHouse"
    SNOWFLAKE = "snowflake"
    REDIS = "redis"
    SMTP = "smtp"
    MONGODB = "mongodb"
    ORACLE = "oracle"
    ES = "es"
    GOOGLE_SHEETS = "googleSheets"
    REST_API = "restApi"
    GRAPHQL = "graphql"


class AuthType(str, Enum):
    """Authentication schemes for HTTP datasources."""

    NO_AUTH = "NO_AUTH"
    BASIC_AUTH = "BASIC_AUTH"
    DIGEST_AUTH = "DIGEST_AUTH"
    OAUTH2 = "OAUTH2"
    OAUTH2_INHERIT_FROM_LOGIN = "OAUTH2_INHERIT_FROM_LOGIN"


class HttpOAuthGrantType(str, Enum):
    """OAuth 2.0 grant flows supported by HTTP datasources."""

    AUTHORIZATION_CODE = "authorization_code"
    CLIENT_CREDENTIALS = "client_credentials"


class ClientCredentialsLocation(str, Enum):
    """Where client credentials are placed when refreshing a token."""

    BODY = "BODY"
    HEADER = "HEADER"


class SSLCertVerification(str, Enum):
    """Certificate verification policy for HTTPS datasources."""

    VERIFY_CA_CERT = "VERIFY_CA_CERT"
    VERIFY_SELF_SIGNED_CERT = "VERIFY_SELF_SIGNED_CERT"
    DISABLED = "DISABLED"


class StructureKind(str, Enum):
    """Kind of object reported by structure introspection."""

    TABLE = "TABLE"
    VIEW = "VIEW"
    ALIAS = "ALIAS"
    COLLECTION = "COLLECTION"


class ProbeErrorKind(str, Enum):
    """Classification of a failed datasource test."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    UPSTREAM = "upstream"
