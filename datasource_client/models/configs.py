"""Connector configuration variants for datasources.

Each connector family has its own pydantic model. The variant in use is not
carried inside the payload: it is selected by the connector-type tag on the
owning datasource (see ``CONFIG_VARIANTS`` and ``parse_config``).

Mongo and Oracle keep the full relational field set on the wire and switch
between sub-shapes with a flag (``using_uri`` / ``using_sid``). The platform
expects that superset payload, so it is preserved as-is; the fields that
actually matter for a given value are reported by ``active_fields()`` and only
those are checked by ``datasource_client.quality.checks``.

Python attributes are snake_case; the wire format is camelCase. Unknown wire
fields are kept and re-emitted.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.enums import (
    AuthType,
    ClientCredentialsLocation,
    DatasourceType,
    HttpOAuthGrantType,
    SSLCertVerification,
)


class WireModel(BaseModel):
    """Base for every model exchanged with the platform API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def active_fields(self) -> tuple[str, ...]:
        """Names of the fields that must be filled in for this value."""
        return ()

    def nested_configs(self) -> dict[str, WireModel]:
        """Nested sub-configurations whose own active fields also apply."""
        return {}

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase payload the platform expects."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class KeyValue(WireModel):
    key: str = ""
    value: str = ""


# ---------------------------------------------------------------------------
# Relational family
# ---------------------------------------------------------------------------
class SQLConfig(WireModel):
    """Host/port/credentials shape shared by all relational connectors."""

    host: str = ""
    port: str = ""
    database: str = ""
    username: str = ""
    password: str = ""
    using_ssl: bool = False
    enable_turn_off_prepared_statement: bool = False

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_string(cls, value: Any) -> Any:
        # The API carries ports as strings; accept ints from Python callers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def active_fields(self) -> tuple[str, ...]:
        return ("host", "port")


class MongoConfig(SQLConfig):
    """Mongo connection, either by URI or by the inherited host fields.

    When ``using_uri`` is set the URI is authoritative and the host, port,
    database and credential fields are inert.
    """

    uri: str = ""
    using_uri: bool = False

    def active_fields(self) -> tuple[str, ...]:
        if self.using_uri:
            return ("uri",)
        return super().active_fields()


class OracleConfig(SQLConfig):
    """Oracle connection addressed by service name or by SID."""

    service_name: str = ""
    sid: str = ""
    using_sid: bool = False

    def active_fields(self) -> tuple[str, ...]:
        target = "sid" if self.using_sid else "service_name"
        return (*super().active_fields(), target)


# ---------------------------------------------------------------------------
# Search and spreadsheet services
# ---------------------------------------------------------------------------
class EsConfig(WireModel):
    connection_string: str = ""
    username: str = ""
    password: str = ""
    skip_tls: bool = False

    def active_fields(self) -> tuple[str, ...]:
        return ("connection_string",)


class GoogleSheetsConfig(WireModel):
    service_account: str = ""

    def active_fields(self) -> tuple[str, ...]:
        return ("service_account",)


# ---------------------------------------------------------------------------
# HTTP authentication (discriminated by ``type``)
# ---------------------------------------------------------------------------
class OAuthBasicConfig(WireModel):
    """App key / secret pair used by OAuth-like connectors."""

    grant_type: Optional[HttpOAuthGrantType] = None
    client_id: str = ""
    client_secret: str = ""

    def active_fields(self) -> tuple[str, ...]:
        return ("grant_type", "client_id", "client_secret")


class NoAuthConfig(WireModel):
    type: Literal["NO_AUTH"] = AuthType.NO_AUTH.value


class BasicAuthConfig(WireModel):
    """Username/password credentials for basic and digest authentication."""

    type: Literal["BASIC_AUTH", "DIGEST_AUTH"] = AuthType.BASIC_AUTH.value
    username: str = ""
    password: str = ""

    def active_fields(self) -> tuple[str, ...]:
        return ("username", "password")


class OAuthConfig(OAuthBasicConfig):
    """OAuth 2.0 client configuration.

    The header and refresh flags default to the values the platform UI sends.
    """

    type: Literal["OAUTH2"] = AuthType.OAUTH2.value
    scope_string: str = ""
    authorization_url: str = ""
    access_token_url: str = ""
    is_authorization_header: bool = True
    is_token_header: bool = True
    refresh_token_client_credentials_location: ClientCredentialsLocation = (
        ClientCredentialsLocation.BODY
    )
    send_scope_with_refresh_token: bool = False
    custom_authentication_parameters: list[KeyValue] = Field(default_factory=list)

    def active_fields(self) -> tuple[str, ...]:
        return (
            *super().active_fields(),
            "scope_string",
            "authorization_url",
            "access_token_url",
        )


class InheritedOAuthConfig(WireModel):
    """Reuse the OAuth session of the user's platform login."""

    type: Literal["OAUTH2_INHERIT_FROM_LOGIN"] = AuthType.OAUTH2_INHERIT_FROM_LOGIN.value
    auth_id: Optional[str] = None


HttpAuthConfig = Annotated[
    Union[NoAuthConfig, BasicAuthConfig, OAuthConfig, InheritedOAuthConfig],
    Field(discriminator="type"),
]


class SSLConfig(WireModel):
    ssl_cert_verification_type: SSLCertVerification = SSLCertVerification.VERIFY_CA_CERT
    self_signed_cert: Optional[str] = None

    def active_fields(self) -> tuple[str, ...]:
        if self.ssl_cert_verification_type is SSLCertVerification.VERIFY_SELF_SIGNED_CERT:
            return ("self_signed_cert",)
        return ()


class HttpConfig(WireModel):
    """Generic HTTP endpoint (REST and GraphQL connectors)."""

    url: str = ""
    headers: list[KeyValue] = Field(default_factory=list)
    params: list[KeyValue] = Field(default_factory=list)
    body_form_data: list[KeyValue] = Field(default_factory=list)
    auth_config: HttpAuthConfig = Field(default_factory=NoAuthConfig)
    ssl_config: SSLConfig = Field(default_factory=SSLConfig)

    def active_fields(self) -> tuple[str, ...]:
        return ("url",)

    def nested_configs(self) -> dict[str, WireModel]:
        return {"auth_config": self.auth_config, "ssl_config": self.ssl_config}


DatasourceConfig = Union[
    SQLConfig,
    MongoConfig,
    OracleConfig,
    EsConfig,
    GoogleSheetsConfig,
    OAuthBasicConfig,
    HttpConfig,
]

# ---------------------------------------------------------------------------
# Tag registry: connector type -> configuration variant
# ---------------------------------------------------------------------------
CONFIG_VARIANTS: dict[str, type[WireModel]] = {
    DatasourceType.MYSQL.value: SQLConfig,
    DatasourceType.POSTGRES.value: SQLConfig,
    DatasourceType.MSSQL.value: SQLConfig,
    DatasourceType.MARIADB.value: SQLConfig,
    DatasourceType.CLICKHOUSE.value: SQLConfig,
    DatasourceType.SNOWFLAKE.value: SQLConfig,
    DatasourceType.REDIS.value: SQLConfig,
    DatasourceType.SMTP.value: SQLConfig,
    DatasourceType.MONGODB.value: MongoConfig,
    DatasourceType.ORACLE.value: OracleConfig,
    DatasourceType.ES.value: EsConfig,
    DatasourceType.GOOGLE_SHEETS.value: GoogleSheetsConfig,
    DatasourceType.REST_API.value: HttpConfig,
    DatasourceType.GRAPHQL.value: HttpConfig,
}


def tag_value(tag: str | DatasourceType) -> str:
    """Return the plain string form of a connector-type tag."""
    if isinstance(tag, DatasourceType):
        return tag.value
    return tag


def config_model_for(tag: str | DatasourceType) -> type[WireModel] | None:
    """Return the configuration model registered for *tag*.

    ``None`` means the tag names a plugin-provided connector type whose
    configuration is opaque to this package.
    """
    return CONFIG_VARIANTS.get(tag_value(tag))


def parse_config(tag: str | DatasourceType, raw: Any) -> WireModel | dict[str, Any]:
    """Interpret *raw* as the configuration variant selected by *tag*.

    Instances of another variant are re-read through their wire payload, so a
    value built for one connector type is checked against the shape of the
    requested one rather than accepted by class.

    Raises:
        pydantic.ValidationError: If a field has the wrong type or the HTTP
            auth discriminant is unknown.
        TypeError: If *raw* is not a mapping or a configuration model.
    """
    model = config_model_for(tag)

    if isinstance(raw, BaseModel):
        if model is not None and type(raw) is model:
            return raw
        payload: Any = raw.model_dump(by_alias=True, mode="json", exclude_none=True)
    elif isinstance(raw, Mapping):
        payload = dict(raw)
    else:
        raise TypeError(
            f"datasource config for '{tag_value(tag)}' must be a mapping, "
            f"got {type(raw).__name__}"
        )

    if model is None:
        return payload
    return model.model_validate(payload)
