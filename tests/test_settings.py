"""Tests for pydantic-settings configuration."""

from datasource_client.core.config import Settings


def test_defaults(monkeypatch):
    for name in (
        "API_BASE_URL",
        "REQUEST_TIMEOUT_SECONDS",
        "TEST_DATASOURCE_TIMEOUT_SECONDS",
        "MAX_CONCURRENT_REQUESTS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)
    assert settings.request_timeout_seconds == 10.0
    assert settings.test_datasource_timeout_seconds == 30.0
    assert settings.test_timeout_is_extended is True
    assert settings.max_concurrent_requests == 5


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://lowcode.example.com/api")
    monkeypatch.setenv("TEST_DATASOURCE_TIMEOUT_SECONDS", "5")

    settings = Settings(_env_file=None)
    assert settings.api_base_url == "https://lowcode.example.com/api"
    assert settings.test_datasource_timeout_seconds == 5.0
    assert settings.test_timeout_is_extended is False
