"""Tests for settings loading."""

import pytest

from a2ui_chat.config import DEFAULT_CATALOG_URIS, get_settings
from a2ui_chat.errors import ConfigurationError


class TestSettings:
    """Test settings configuration."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Defaults point at a local agent and advertise both catalogs."""
        monkeypatch.chdir(tmp_path)
        settings = get_settings()
        assert settings.endpoint_url == "http://localhost:10002/a2a"
        assert settings.supported_catalog_uris == list(DEFAULT_CATALOG_URIS)
        assert settings.agent_name == "MyCharts Agent"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Environment variables use the A2UI_CHAT_ prefix."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("A2UI_CHAT_AGENT_URL", "https://agent.example.com/")
        monkeypatch.setenv("A2UI_CHAT_ENDPOINT_PATH", "rpc")
        monkeypatch.setenv("A2UI_CHAT_SUPPORTED_CATALOG_URIS", '["catalog://only"]')
        settings = get_settings()
        assert settings.endpoint_url == "https://agent.example.com/rpc"
        assert settings.supported_catalog_uris == ["catalog://only"]

    def test_explicit_overrides_win_and_none_is_ignored(self, monkeypatch, tmp_path):
        """Keyword overrides take precedence; None leaves the default."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("A2UI_CHAT_AGENT_URL", "https://env.example.com")
        settings = get_settings(agent_url="http://cli.example.com", supported_catalog_uris=None)
        assert settings.agent_url == "http://cli.example.com"
        assert settings.supported_catalog_uris == list(DEFAULT_CATALOG_URIS)

    def test_dotenv_file(self, monkeypatch, tmp_path):
        """Settings are read from a .env file in the working directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("A2UI_CHAT_AGENT_NAME=Chart Bot\n", encoding="utf-8")
        assert get_settings().agent_name == "Chart Bot"

    def test_rejects_non_http_url(self, monkeypatch, tmp_path):
        """A URL without an http(s) scheme is a configuration error."""
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError):
            get_settings(agent_url="agent.local:10002")
