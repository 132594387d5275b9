"""Configuration management for a2ui-chat."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

STANDARD_CATALOG_URI = (
    "https://raw.githubusercontent.com/google/A2UI/refs/heads/main/specification/0.8/json/"
    "standard_catalog_definition.json"
)
RIZZCHARTS_CATALOG_URI = (
    "https://raw.githubusercontent.com/google/A2UI/refs/heads/main/a2a_agents/python/adk/samples/rizzcharts/"
    "rizzcharts_catalog_definition.json"
)
DEFAULT_CATALOG_URIS = (STANDARD_CATALOG_URI, RIZZCHARTS_CATALOG_URI)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="A2UI_CHAT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Agent endpoint
    agent_url: str = Field(default="http://localhost:10002", description="Base URL of the remote agent")
    endpoint_path: str = Field(default="/a2a", description="Path receiving turn requests")
    request_timeout_seconds: float = Field(default=60.0, description="Timeout for one agent request in seconds")

    # Client capabilities
    supported_catalog_uris: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATALOG_URIS),
        description="Component catalogs the client can render",
    )

    # Agent presentation
    agent_name: str = Field(default="MyCharts Agent", description="Display name for agent turns")
    agent_icon: str | None = Field(default="rizz-agent.png", description="Icon reference for agent turns")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("agent_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("endpoint_path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = f"/{value}"
        return value

    @property
    def endpoint_url(self) -> str:
        return f"{self.agent_url}{self.endpoint_path}"


def get_settings(**overrides: Any) -> Settings:
    """Get application settings.

    Args:
        **overrides: Field values taking precedence over environment and ``.env``

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the agent URL is empty or not http(s)
    """
    settings = Settings(**{key: value for key, value in overrides.items() if value is not None})
    if not settings.agent_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"agent_url must be an http(s) URL, got {settings.agent_url!r}")
    return settings
