"""Pydantic-settings configuration for the datasource client.

Loads the platform API location, per-call deadlines and transport limits from
a .env file with sensible defaults for local development. The computed
``test_timeout_is_extended`` field lets callers assert the test deadline is
the longer of the two.
"""

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Platform API
    api_base_url: str = "http://localhost:3000/api"

    # Deadlines (seconds)
    request_timeout_seconds: float = 10.0
    test_datasource_timeout_seconds: float = 30.0

    # Transport
    max_retries: int = 3
    max_concurrent_requests: int = 5
    max_connections: int = 10
    max_keepalive_connections: int = 5

    # Logging
    log_level: str = "INFO"

    @computed_field
    @property
    def test_timeout_is_extended(self) -> bool:
        """True when the datasource test deadline exceeds the standard one."""
        return self.test_datasource_timeout_seconds > self.request_timeout_seconds


# Singleton instance
settings = Settings()
