"""Root pytest configuration and shared fixtures.

Provides common test fixtures used across all test modules:
- load_fixture: callable to load JSON fixtures from tests/fixtures/
- mongo_uri_config / mysql_config / oauth_http_config: wire-format
  configuration payloads for the most common connector shapes
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture() -> Any:
    """Return a callable that loads JSON fixtures from tests/fixtures/.

    Usage::

        def test_something(load_fixture):
            data = load_fixture("datasource_types.json")
    """
    def _load(filename: str) -> Any:
        filepath = FIXTURES_DIR / filename
        with filepath.open("r", encoding="utf-8") as f:
            return json.load(f)
    return _load


@pytest.fixture
def mysql_config() -> dict[str, Any]:
    return {
        "host": "db.internal",
        "port": "3306",
        "database": "shop",
        "username": "reader",
        "password": "s3cret",
        "usingSsl": False,
        "enableTurnOffPreparedStatement": False,
    }


@pytest.fixture
def mongo_uri_config() -> dict[str, Any]:
    """Mongo config addressed by URI, with every host field left empty."""
    return {
        "uri": "mongodb://h/db",
        "usingUri": True,
        "host": "",
        "port": "",
        "database": "",
        "username": "",
        "password": "",
        "usingSsl": False,
        "enableTurnOffPreparedStatement": False,
    }


@pytest.fixture
def oauth_http_config() -> dict[str, Any]:
    return {
        "url": "https://api.example.com/v2",
        "headers": [{"key": "Accept", "value": "application/json"}],
        "params": [],
        "bodyFormData": [],
        "authConfig": {
            "type": "OAUTH2",
            "grantType": "authorization_code",
            "clientId": "client-1",
            "clientSecret": "shh",
            "scopeString": "read write",
            "authorizationUrl": "https://auth.example.com/authorize",
            "accessTokenUrl": "https://auth.example.com/token",
            "customAuthenticationParameters": [{"key": "audience", "value": "api"}],
        },
        "sslConfig": {"sslCertVerificationType": "VERIFY_CA_CERT"},
    }
