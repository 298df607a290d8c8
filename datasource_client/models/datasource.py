"""Datasource entity and its read projections.

``Datasource`` is the addressable resource: identity, connector-type tag,
ownership and one configuration variant matching the tag. The remaining
models are query-time projections returned by the platform and are never
persisted on their own.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ..core.enums import DatasourceType, ProbeErrorKind, StructureKind
from ..core.exceptions import (
    ConnectorError,
    DatasourceConnectionError,
    RequestTimeoutError,
    UpstreamError,
)
from .configs import WireModel, parse_config, tag_value

# Identity fields fixed once a datasource exists
_IMMUTABLE_FIELDS = frozenset({"id", "type"})


class Datasource(WireModel):
    """A named, persisted connection configuration.

    ``datasource_config`` holds the variant registered for ``type`` (see
    ``configs.CONFIG_VARIANTS``), or a plain dict for plugin-provided types.
    ``id`` and ``type`` cannot be reassigned once set; use ``with_config`` to
    replace the whole configuration.
    """

    id: Optional[str] = None
    name: str = ""
    type: str
    organization_id: Optional[str] = None
    creation_source: Optional[int] = None
    datasource_status: Optional[str] = None
    create_time: Optional[int] = None
    datasource_config: Any = None

    @field_validator("type", mode="before")
    @classmethod
    def _tag_as_string(cls, value: Any) -> Any:
        if isinstance(value, DatasourceType):
            return value.value
        return value

    @field_validator("datasource_config", mode="before")
    @classmethod
    def _config_for_tag(cls, value: Any, info: ValidationInfo) -> Any:
        tag = info.data.get("type")
        if value is None or tag is None:
            return value
        try:
            return parse_config(tag, value)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and getattr(self, name, None) is not None:
            raise AttributeError(f"Datasource.{name} cannot change once set")
        super().__setattr__(name, value)

    @property
    def datasource_type(self) -> DatasourceType | None:
        """The built-in connector type, or None for plugin-provided types."""
        try:
            return DatasourceType(self.type)
        except ValueError:
            return None

    def with_config(self, config: Any) -> Datasource:
        """Return a copy whose configuration is replaced wholesale."""
        return self.model_copy(
            update={"datasource_config": parse_config(tag_value(self.type), config)}
        )

    def to_request(self) -> dict[str, Any]:
        """Payload for create/update/test requests."""
        return self.to_wire()


class DatasourceInfo(WireModel):
    datasource: Datasource
    edit: bool = False
    creator_name: Optional[str] = None


class NodePluginDatasourceInfo(WireModel):
    """Plugin-backed datasource as listed for an app: metadata only, no config."""

    id: Optional[str] = None
    name: str = ""
    type: str
    organization_id: Optional[str] = None
    creation_source: Optional[int] = None
    datasource_status: Optional[str] = None
    plugin_definition: dict[str, Any] = Field(default_factory=dict)


class DataSourceTypeInfo(WireModel):
    """A connector type an organization may use."""

    id: str
    name: str = ""
    version: str = ""
    has_structure_info: bool = False
    definition: Optional[dict[str, Any]] = None


class DatasourceColumn(WireModel):
    name: str
    type: str = ""
    default_value: Optional[str] = None
    is_autogenerated: bool = False


class DatasourceTable(WireModel):
    name: str
    columns: list[DatasourceColumn] = Field(default_factory=list)
    keys: list[Any] = Field(default_factory=list)
    kind: StructureKind = Field(default=StructureKind.TABLE, alias="type")


class DatasourceStructure(WireModel):
    """Schema of a live connection, as introspected by the platform."""

    tables: list[DatasourceTable] = Field(default_factory=list)

    def table(self, name: str) -> DatasourceTable | None:
        for entry in self.tables:
            if entry.name == name:
                return entry
        return None


class DatasourceTestResult(BaseModel):
    """Outcome of probing a datasource configuration.

    A failed probe is a normal result, not an exception. Callers that prefer
    exceptions call ``raise_for_failure()``.
    """

    success: bool
    message: str = ""
    error_kind: Optional[ProbeErrorKind] = None
    timeout_seconds: float
    status_code: Optional[int] = None
    datasource: Optional[Datasource] = None

    def raise_for_failure(self) -> None:
        """Raise the error matching a failed outcome; no-op on success."""
        if self.success:
            return
        error_cls: type[ConnectorError] = {
            ProbeErrorKind.TIMEOUT: RequestTimeoutError,
            ProbeErrorKind.CONNECTION: DatasourceConnectionError,
        }.get(self.error_kind, UpstreamError)
        raise error_cls(self.message, status_code=self.status_code)
