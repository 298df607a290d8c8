#!/usr/bin/env python3
"""Datasource API verification script.

Checks a running platform end to end:
  - connector types available to an organization
  - datasources listed for an organization and/or app
  - a connection test for a datasource described in a JSON file

Usage:
    python scripts/verify_datasources.py --org org-1
    python scripts/verify_datasources.py --org org-1 --app app-1
    python scripts/verify_datasources.py --org org-1 --test ds.json --base-url http://host/api

The JSON file holds a wire-format datasource, e.g.
``{"name": "orders", "type": "mysql", "datasourceConfig": {"host": ..., "port": "3306"}}``.
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure project root is on sys.path so ``datasource_client`` imports work
# when this script is run from a source checkout.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from datasource_client import ConnectorError, DatasourceConnector  # noqa: E402
from datasource_client.core.config import settings  # noqa: E402


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
def _now() -> str:
    """Return current UTC timestamp string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _pass(label: str, detail: str = "") -> None:
    suffix = f" -- {detail}" if detail else ""
    print(f"  [PASS] {label}{suffix}")


def _fail(label: str, detail: str = "") -> None:
    suffix = f" -- {detail}" if detail else ""
    print(f"  [FAIL] {label}{suffix}")


def _warn(label: str, detail: str = "") -> None:
    suffix = f" -- {detail}" if detail else ""
    print(f"  [WARN] {label}{suffix}")


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------
async def check_types(conn: DatasourceConnector, org_id: str) -> list[str]:
    print(f"\n[{_now()}] Fetching connector types for {org_id}...")
    try:
        types = await conn.fetch_datasource_types(org_id)
    except ConnectorError as exc:
        _fail("datasourceTypes", exc.message)
        return [f"datasourceTypes failed: {exc.message}"]

    plugins = [t.id for t in types if t.definition is not None]
    _pass("datasourceTypes", f"{len(types)} types, {len(plugins)} plugin-provided")
    return []


async def check_listing(
    conn: DatasourceConnector, org_id: str | None, app_id: str | None
) -> list[str]:
    failures: list[str] = []
    print(f"\n[{_now()}] Listing datasources...")

    if org_id:
        try:
            infos = await conn.fetch_datasource_by_org(org_id)
            _pass("listByOrg", f"{len(infos)} datasource(s)")
        except ConnectorError as exc:
            _fail("listByOrg", exc.message)
            failures.append(f"listByOrg failed: {exc.message}")

    if app_id:
        try:
            infos = await conn.fetch_datasource_by_app(app_id)
            _pass("listByApp", f"{len(infos)} datasource(s)")
        except ConnectorError as exc:
            _fail("listByApp", exc.message)
            failures.append(f"listByApp failed: {exc.message}")

        try:
            plugins = await conn.fetch_js_datasource_by_app(app_id)
            _pass("jsDatasourcePlugins", f"{len(plugins)} plugin datasource(s)")
        except ConnectorError as exc:
            _warn("jsDatasourcePlugins", exc.message)

    return failures


async def check_connection(conn: DatasourceConnector, path: Path) -> list[str]:
    print(f"\n[{_now()}] Testing datasource from {path}...")
    payload = json.loads(path.read_text(encoding="utf-8"))

    try:
        result = await conn.test_datasource(payload)
    except ConnectorError as exc:
        _fail("test", exc.message)
        return [f"test rejected: {exc.message}"]

    if result.success:
        _pass("test", f"{payload.get('type')} connection succeeded")
        return []

    _fail("test", f"{result.error_kind.value}: {result.message}")
    return [f"test failed ({result.error_kind.value}): {result.message}"]


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
async def main() -> None:
    parser = argparse.ArgumentParser(description="Verify the platform datasource API")
    parser.add_argument("--org", help="Organization id for type and datasource listing")
    parser.add_argument("--app", help="App id for datasource listing")
    parser.add_argument("--test", type=Path, help="JSON file with a datasource to test")
    parser.add_argument(
        "--base-url",
        default=settings.api_base_url,
        help=f"Platform API base URL (default: {settings.api_base_url})",
    )
    args = parser.parse_args()

    if not (args.org or args.app or args.test):
        parser.error("at least one of --org, --app or --test is required")

    print("=" * 60)
    print("  Datasource API Verification")
    print("=" * 60)
    print(f"  API:  {args.base_url}")
    print(f"  Time: {_now()}")

    all_failures: list[str] = []
    async with DatasourceConnector(base_url=args.base_url) as conn:
        if args.org:
            all_failures.extend(await check_types(conn, args.org))
        if args.org or args.app:
            all_failures.extend(await check_listing(conn, args.org, args.app))
        if args.test:
            all_failures.extend(await check_connection(conn, args.test))

    print("\n" + "=" * 60)
    if not all_failures:
        print("  RESULT: All datasource checks PASSED")
    else:
        print(f"  RESULT: {len(all_failures)} failure(s):")
        for f in all_failures:
            print(f"    - {f}")
    print("=" * 60)

    if all_failures:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
