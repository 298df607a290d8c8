"""Connector-specific pytest fixtures.

Provides ``platform``: an in-memory stand-in for the platform API, mounted
with respx on ``http://platform.test``. It keeps datasources across calls so
tests can observe create/list/update/delete round trips, counts structure
probes behind a cache, and records the read deadline of every test request.

Behaviour of the fake:
- app ``app-1`` belongs to organization ``org-1``; other ids are unknown (404)
- names are unique per organization (409)
- test requests against host ``unreachable.invalid`` time out, and against
  ``refused.invalid`` return a 2xx envelope reporting failure, and against
  ``slow.invalid`` answer only after ``probe_delay`` seconds
- only plugin ``dynamodb`` answers dynamic config queries (400 otherwise)
"""

from __future__ import annotations

import asyncio
import itertools
import json
from typing import Any

import httpx
import pytest
import respx

BASE_URL = "http://platform.test"
HOST = "platform.test"

ORG_ID = "org-1"
APP_ID = "app-1"

UNREACHABLE_HOST = "unreachable.invalid"
REFUSED_HOST = "refused.invalid"
SLOW_HOST = "slow.invalid"


def _envelope(data: Any, status: int = 200) -> httpx.Response:
    return httpx.Response(
        status, json={"code": 1, "message": "", "success": True, "data": data}
    )


def _failure(status: int, message: str, code: int = 500) -> httpx.Response:
    return httpx.Response(
        status, json={"code": code, "message": message, "success": False, "data": None}
    )


class FakePlatform:
    """Stateful datasource endpoints backed by a dict."""

    def __init__(
        self,
        types: list[dict[str, Any]],
        structure: dict[str, Any],
        js_plugins: list[dict[str, Any]],
    ) -> None:
        self.datasources: dict[str, dict[str, Any]] = {}
        self.apps = {APP_ID: ORG_ID}
        self.types = {ORG_ID: types}
        self.structure = structure
        self.js_plugins = {APP_ID: js_plugins}
        self.structure_cache: dict[str, dict[str, Any]] = {}
        self.structure_probes = 0
        self.test_timeouts: list[float] = []
        self.probe_delay = 2.0
        self.tested: list[dict[str, Any]] = []
        self.dynamic_config_requests: list[Any] = []
        self._ids = itertools.count(1)

    # -----------------------------------------------------------------------
    # Route table
    # -----------------------------------------------------------------------
    def install(self, router: respx.MockRouter) -> None:
        ds = "/v1/datasources"
        router.get(host=HOST, path=f"{ds}/listByApp").mock(side_effect=self.list_by_app)
        router.get(host=HOST, path=f"{ds}/listByOrg").mock(side_effect=self.list_by_org)
        router.get(host=HOST, path=f"{ds}/jsDatasourcePlugins").mock(
            side_effect=self.js_datasource_plugins
        )
        router.post(host=HOST, path=f"{ds}/test").mock(side_effect=self.test)
        router.post(host=HOST, path=f"{ds}/getPluginDynamicConfig").mock(
            side_effect=self.dynamic_config
        )
        router.post(host=HOST, path=ds).mock(side_effect=self.create)
        router.get(
            host=HOST, path__regex=rf"^{ds}/(?P<ds_id>[^/]+)/structure$"
        ).mock(side_effect=self.fetch_structure)
        router.put(host=HOST, path__regex=rf"^{ds}/(?P<ds_id>[^/]+)$").mock(
            side_effect=self.update
        )
        router.delete(host=HOST, path__regex=rf"^{ds}/(?P<ds_id>[^/]+)$").mock(
            side_effect=self.delete
        )
        router.get(
            host=HOST, path__regex=r"^/v1/organizations/(?P<org_id>[^/]+)/datasourceTypes$"
        ).mock(side_effect=self.datasource_types)

    # -----------------------------------------------------------------------
    # Listing
    # -----------------------------------------------------------------------
    def _infos(self, org_id: str) -> list[dict[str, Any]]:
        return [
            {"datasource": entity, "edit": True, "creatorName": "alice"}
            for entity in self.datasources.values()
            if entity.get("organizationId") == org_id
        ]

    def list_by_app(self, request: httpx.Request) -> httpx.Response:
        org_id = self.apps.get(request.url.params.get("appId"))
        if org_id is None:
            return _failure(404, "app not found", code=404)
        return _envelope(self._infos(org_id))

    def list_by_org(self, request: httpx.Request) -> httpx.Response:
        org_id = request.url.params.get("orgId")
        if org_id != ORG_ID:
            return _failure(404, "organization not found", code=404)
        return _envelope(self._infos(org_id))

    def js_datasource_plugins(self, request: httpx.Request) -> httpx.Response:
        app_id = request.url.params.get("appId")
        if app_id not in self.js_plugins:
            return _failure(404, "app not found", code=404)
        return _envelope(self.js_plugins[app_id])

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------
    def create(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        org_id = body.get("organizationId") or ORG_ID
        if any(
            entity["name"] == body.get("name") and entity["organizationId"] == org_id
            for entity in self.datasources.values()
        ):
            return _failure(409, f"datasource name '{body['name']}' already exists", code=409)

        ds_id = f"ds-{next(self._ids)}"
        entity = {**body, "id": ds_id, "organizationId": org_id, "creationSource": 0}
        self.datasources[ds_id] = entity
        return _envelope(entity)

    def update(self, request: httpx.Request, ds_id: str) -> httpx.Response:
        if ds_id not in self.datasources:
            return _failure(404, f"datasource {ds_id} not found", code=404)
        body = json.loads(request.content)
        entity = {**self.datasources[ds_id], **body, "id": ds_id}
        self.datasources[ds_id] = entity
        self.structure_cache.pop(ds_id, None)
        return _envelope(entity)

    def delete(self, request: httpx.Request, ds_id: str) -> httpx.Response:
        entity = self.datasources.pop(ds_id, None)
        if entity is None:
            return _failure(404, f"datasource {ds_id} not found", code=404)
        self.structure_cache.pop(ds_id, None)
        return _envelope(entity)

    # -----------------------------------------------------------------------
    # Probing and introspection
    # -----------------------------------------------------------------------
    async def test(self, request: httpx.Request) -> httpx.Response:
        self.test_timeouts.append(request.extensions["timeout"]["read"])
        body = json.loads(request.content)
        self.tested.append(body)

        host = (body.get("datasourceConfig") or {}).get("host")
        if host == UNREACHABLE_HOST:
            raise httpx.ReadTimeout("probe timed out", request=request)
        if host == SLOW_HOST:
            await asyncio.sleep(self.probe_delay)
        if host == REFUSED_HOST:
            return _failure(200, f"Connection refused: {host}")
        return _envelope(body)

    def fetch_structure(self, request: httpx.Request, ds_id: str) -> httpx.Response:
        if ds_id not in self.datasources:
            return _failure(404, f"datasource {ds_id} not found", code=404)
        ignore_cache = request.url.params.get("ignoreCache") == "true"
        if ignore_cache or ds_id not in self.structure_cache:
            self.structure_probes += 1
            self.structure_cache[ds_id] = self.structure
        return _envelope(self.structure_cache[ds_id])

    def datasource_types(self, request: httpx.Request, org_id: str) -> httpx.Response:
        if org_id not in self.types:
            return _failure(404, "organization not found", code=404)
        return _envelope(self.types[org_id])

    def dynamic_config(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.dynamic_config_requests.append(body)
        query = body[0]
        if query["pluginName"] != "dynamodb":
            return _failure(400, f"unknown plugin {query['pluginName']}", code=400)
        return _envelope(
            [
                {"label": "orders", "value": "orders"},
                {"label": "customers", "value": "customers"},
            ]
        )


@pytest.fixture
def platform(load_fixture) -> Any:
    """Mount a fresh FakePlatform for the duration of a test."""
    fake = FakePlatform(
        types=load_fixture("datasource_types.json"),
        structure=load_fixture("datasource_structure.json"),
        js_plugins=load_fixture("js_datasource_plugins.json"),
    )
    with respx.mock(assert_all_called=False) as router:
        fake.install(router)
        yield fake
