import pytest

from mcp_calendar.app.config import (
    DEFAULT_MCP_URL,
    DEFAULT_TIMEZONE,
    StartupError,
    get_settings,
    reset_settings,
)
from mcp_calendar.infrastructure.platform_manager import get_parameters


def test_settings_load_from_environment(monkeypatch):
    monkeypatch.setenv("CLIENT_ID", "cid")
    monkeypatch.setenv("CLIENT_SECRET", "csecret")
    monkeypatch.setenv("REDIRECT_URI", "http://localhost:3000/callback")
    monkeypatch.setenv("REFRESH_TOKEN", "rt")
    monkeypatch.setenv("CALENDAR_MCP_URL", "https://mcp.example.com/")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.client_id == "cid"
    assert settings.client_secret == "csecret"
    assert settings.redirect_uri == "http://localhost:3000/callback"
    assert settings.refresh_token == "rt"
    assert settings.calendar_mcp_url == "https://mcp.example.com"
    assert settings.log_level == "DEBUG"


def test_defaults(monkeypatch):
    monkeypatch.setenv("CLIENT_ID", "cid")
    monkeypatch.setenv("CLIENT_SECRET", "csecret")

    settings = get_settings()

    assert settings.default_timezone == DEFAULT_TIMEZONE == "Asia/Seoul"
    assert settings.calendar_mcp_url == DEFAULT_MCP_URL
    assert settings.refresh_token is None
    assert settings.agent_hmac_secret is None
    assert settings.redis_url is None


@pytest.mark.parametrize(
    "present, missing",
    [
        ({}, "CLIENT_ID and CLIENT_SECRET"),
        ({"CLIENT_ID": "cid"}, "CLIENT_SECRET"),
        ({"CLIENT_SECRET": "s"}, "CLIENT_ID"),
        ({"CLIENT_ID": "", "CLIENT_SECRET": "s"}, "CLIENT_ID"),
    ],
)
def test_missing_client_credentials_is_a_startup_error(monkeypatch, present, missing):
    for name, value in present.items():
        monkeypatch.setenv(name, value)
    with pytest.raises(StartupError, match=f"^{missing} environment variables are required$"):
        get_settings()


def test_settings_are_cached_until_reset(monkeypatch):
    monkeypatch.setenv("CLIENT_ID", "first")
    monkeypatch.setenv("CLIENT_SECRET", "s")
    assert get_settings().client_id == "first"

    monkeypatch.setenv("CLIENT_ID", "second")
    assert get_settings().client_id == "first"

    reset_settings()
    assert get_settings().client_id == "second"


def test_get_parameters_reads_uppercase_names(monkeypatch):
    monkeypatch.setenv("MCP_REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("MCP_EMPTY", "")
    assert get_parameters(["redis_url", "empty", "absent"], "MCP_") == {
        "redis_url": "redis://localhost:6379/0",
        "empty": None,
        "absent": None,
    }
