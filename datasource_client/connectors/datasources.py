"""Datasource access connector.

Wraps the platform's ``v1/datasources`` resource: listing by app or
organization, create/update/delete, connection tests, structure
introspection, supported connector types and plugin dynamic configuration.

Configurations are checked locally against their connector type before any
write or test request is sent, so malformed payloads never reach the
platform. Every call is a direct pass-through: nothing is cached, batched or
locked here, and concurrent writes to the same datasource are resolved by the
platform.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..core.config import settings
from ..core.enums import ProbeErrorKind
from ..core.exceptions import (
    ConfigValidationError,
    ConflictError,
    ConnectorError,
    DatasourceConnectionError,
    NotFoundError,
    RequestTimeoutError,
    UpstreamError,
)
from ..models.datasource import (
    DataSourceTypeInfo,
    Datasource,
    DatasourceInfo,
    DatasourceStructure,
    DatasourceTestResult,
    NodePluginDatasourceInfo,
)
from ..quality.checks import validate_config
from .base import BaseConnector

_DATASOURCE = TypeAdapter(Datasource)
_DATASOURCE_INFO_LIST = TypeAdapter(list[DatasourceInfo])
_JS_PLUGIN_LIST = TypeAdapter(list[NodePluginDatasourceInfo])
_TYPE_INFO_LIST = TypeAdapter(list[DataSourceTypeInfo])
_STRUCTURE = TypeAdapter(DatasourceStructure)
_RAW = TypeAdapter(Any)
_RAW_LIST = TypeAdapter(list[Any])


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


class DatasourceConnector(BaseConnector):
    """Client for datasource CRUD, testing and introspection.

    ``test_datasource`` runs under ``settings.test_datasource_timeout_seconds``;
    every other call uses the standard deadline.

    Usage::

        async with DatasourceConnector() as conn:
            created = await conn.create_datasource(
                Datasource(name="orders", type="mysql", datasource_config=cfg)
            )
            structure = await conn.fetch_datasource_structure(created.id)
    """

    SOURCE_NAME: str = "DATASOURCES"
    URL: str = "v1/datasources"
    ORGANIZATIONS_URL: str = "/v1/organizations"
    TEST_TIMEOUT_SECONDS: float = settings.test_datasource_timeout_seconds

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------
    def _prepare(self, datasource: Datasource | Mapping[str, Any]) -> Datasource:
        """Coerce *datasource* to a Datasource and check its configuration."""
        if not isinstance(datasource, Datasource):
            try:
                datasource = Datasource.model_validate(datasource)
            except ValidationError as exc:
                issues = [
                    {
                        "field": ".".join(str(part) for part in error["loc"]) or None,
                        "issue": "type",
                        "message": error["msg"],
                    }
                    for error in exc.errors()
                ]
                raise ConfigValidationError(
                    f"invalid datasource: {exc.error_count()} error(s)", issues=issues
                ) from exc

        raw = datasource.datasource_config
        config = validate_config(datasource.type, raw if raw is not None else {})
        if config is not datasource.datasource_config:
            datasource = datasource.with_config(config)
        return datasource

    # -----------------------------------------------------------------------
    # Listing
    # -----------------------------------------------------------------------
    async def fetch_js_datasource_by_app(
        self, app_id: str, *, timeout: Optional[float] = None
    ) -> list[NodePluginDatasourceInfo]:
        """List plugin-backed datasources used by an app.

        Metadata only; no configuration payload is returned. The platform
        serves this without a session when the app is public.
        """
        return await self._call(
            "GET",
            f"{self.URL}/jsDatasourcePlugins",
            _JS_PLUGIN_LIST,
            params={"appId": app_id},
            timeout=timeout,
        )

    async def fetch_datasource_by_app(
        self, app_id: str, *, timeout: Optional[float] = None
    ) -> list[DatasourceInfo]:
        return await self._call(
            "GET",
            f"{self.URL}/listByApp",
            _DATASOURCE_INFO_LIST,
            params={"appId": app_id},
            timeout=timeout,
        )

    async def fetch_datasource_by_org(
        self, org_id: str, *, timeout: Optional[float] = None
    ) -> list[DatasourceInfo]:
        return await self._call(
            "GET",
            f"{self.URL}/listByOrg",
            _DATASOURCE_INFO_LIST,
            params={"orgId": org_id},
            timeout=timeout,
        )

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------
    async def create_datasource(
        self,
        datasource: Datasource | Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> Datasource:
        """Create a datasource; the platform assigns its id.

        Raises:
            ConfigValidationError: If the configuration does not fit its type.
            ConflictError: If the name is already taken.
        """
        datasource = self._prepare(datasource)
        created = await self._call(
            "POST", self.URL, _DATASOURCE, json=datasource.to_request(), timeout=timeout
        )
        self.log.info(
            "datasource_created",
            datasource_id=created.id,
            datasource_type=created.type,
            name=created.name,
        )
        return created

    async def update_datasource(
        self,
        datasource: Datasource | Mapping[str, Any],
        datasource_id: str,
        *,
        timeout: Optional[float] = None,
    ) -> Datasource:
        """Replace the whole configuration of an existing datasource.

        Raises:
            ConfigValidationError: If the configuration does not fit its type,
                or the entity carries a different id.
            NotFoundError: If no datasource has this id.
        """
        datasource = self._prepare(datasource)
        if datasource.id is not None and datasource.id != datasource_id:
            raise ConfigValidationError(
                f"datasource id '{datasource.id}' does not match target '{datasource_id}'",
                issues=[{"field": "id", "issue": "invalid", "message": "id mismatch"}],
            )
        updated = await self._call(
            "PUT",
            f"{self.URL}/{datasource_id}",
            _DATASOURCE,
            json=datasource.to_request(),
            timeout=timeout,
        )
        self.log.info("datasource_updated", datasource_id=datasource_id)
        return updated

    async def delete_datasource(
        self, datasource_id: str, *, timeout: Optional[float] = None
    ) -> Datasource:
        """Delete a datasource and return it as it was.

        Deleting an already deleted id raises NotFoundError.
        """
        deleted = await self._call(
            "DELETE", f"{self.URL}/{datasource_id}", _DATASOURCE, timeout=timeout
        )
        self.log.info("datasource_deleted", datasource_id=datasource_id)
        return deleted

    # -----------------------------------------------------------------------
    # Connection test
    # -----------------------------------------------------------------------
    async def test_datasource(
        self,
        datasource: Datasource | Mapping[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> DatasourceTestResult:
        """Ask the platform to open a connection with this configuration.

        Probe failures are returned as an unsuccessful result rather than
        raised. Local validation failures and unknown routes still raise.

        Args:
            datasource: Full or partial datasource (type and config required).
            timeout: Deadline in seconds; defaults to TEST_TIMEOUT_SECONDS.

        Raises:
            ConfigValidationError: If the configuration does not fit its type.
        """
        datasource = self._prepare(datasource)
        deadline = self.TEST_TIMEOUT_SECONDS if timeout is None else timeout

        try:
            data = await self._call(
                "POST",
                f"{self.URL}/test",
                _RAW,
                json=datasource.to_request(),
                timeout=deadline,
            )
        except RequestTimeoutError as exc:
            return self._failed_test(exc, ProbeErrorKind.TIMEOUT, deadline)
        except UpstreamError as exc:
            # 2xx envelopes reporting failure carry the provider's cause.
            kind = (
                ProbeErrorKind.UPSTREAM
                if (exc.status_code or 0) >= 500
                else ProbeErrorKind.CONNECTION
            )
            return self._failed_test(exc, kind, deadline)
        except (ConfigValidationError, ConflictError, DatasourceConnectionError) as exc:
            return self._failed_test(exc, ProbeErrorKind.CONNECTION, deadline)

        probed: Optional[Datasource] = None
        if isinstance(data, dict):
            try:
                probed = Datasource.model_validate(data)
            except ValidationError:
                probed = None

        self.log.info("datasource_test_passed", datasource_type=datasource.type)
        return DatasourceTestResult(
            success=True,
            message="connection succeeded",
            timeout_seconds=deadline,
            datasource=probed,
        )

    def _failed_test(
        self, exc: ConnectorError, kind: ProbeErrorKind, deadline: float
    ) -> DatasourceTestResult:
        self.log.warning(
            "datasource_test_failed",
            error_kind=kind.value,
            status_code=exc.status_code,
            error=exc.message,
        )
        return DatasourceTestResult(
            success=False,
            message=exc.message,
            error_kind=kind,
            timeout_seconds=deadline,
            status_code=exc.status_code,
        )

    # -----------------------------------------------------------------------
    # Introspection
    # -----------------------------------------------------------------------
    async def fetch_datasource_structure(
        self,
        datasource_id: str,
        ignore_cache: bool = False,
        *,
        timeout: Optional[float] = None,
    ) -> DatasourceStructure:
        """Fetch the tables/collections of a live datasource.

        The platform caches introspection results; ``ignore_cache=True``
        forces a fresh probe of the external system.

        Raises:
            NotFoundError: If no datasource has this id.
            UpstreamError: If the live connection cannot be introspected.
        """
        return await self._call(
            "GET",
            f"{self.URL}/{datasource_id}/structure",
            _STRUCTURE,
            params={"ignoreCache": _bool_param(ignore_cache)},
            timeout=timeout,
        )

    async def fetch_datasource_types(
        self, org_id: str, *, timeout: Optional[float] = None
    ) -> list[DataSourceTypeInfo]:
        """List connector types, built-in and plugin-provided, for an organization."""
        return await self._call(
            "GET",
            f"{self.ORGANIZATIONS_URL}/{org_id}/datasourceTypes",
            _TYPE_INFO_LIST,
            timeout=timeout,
        )

    async def fetch_dynamic_plugin_config(
        self,
        plugin_name: str,
        path: str,
        config: Any,
        datasource_id: Optional[str] = None,
        *,
        item_model: Optional[type[Any]] = None,
        timeout: Optional[float] = None,
    ) -> list[Any]:
        """Query a connector plugin for runtime configuration options.

        The result shape is defined by the plugin. Items are returned as
        decoded JSON unless ``item_model`` names a type (usually a pydantic
        model) to parse each item into.

        Raises:
            UpstreamError: If the plugin or path is unknown, or the plugin fails.
        """
        if isinstance(config, BaseModel):
            config = config.model_dump(
                by_alias=True, mode="json", exclude_none=True
            )

        request: dict[str, Any] = {
            "pluginName": plugin_name,
            "path": path,
            "dataSourceConfig": config,
        }
        if datasource_id is not None:
            request["dataSourceId"] = datasource_id

        adapter = _RAW_LIST if item_model is None else TypeAdapter(list[item_model])
        try:
            return await self._call(
                "POST",
                f"{self.URL}/getPluginDynamicConfig",
                adapter,
                json=[request],
                timeout=timeout,
            )
        except (ConfigValidationError, NotFoundError) as exc:
            raise UpstreamError(
                f"plugin '{plugin_name}' rejected dynamic config path '{path}': {exc.message}",
                status_code=exc.status_code,
                code=exc.code,
            ) from exc
