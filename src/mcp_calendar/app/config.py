from dataclasses import dataclass

from mcp_calendar.infrastructure.platform_manager import get_parameters

# Constants
SERVER_NAME = "mcp_calendar"
SERVER_VERSION = "1.0.0"
CALENDAR_ID = "primary"
DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_MCP_URL = "http://localhost:8000"
NONCE_TTL = 300  # seconds


class StartupError(Exception):
    """Raised when required configuration is missing; the server must not start."""


@dataclass(frozen=True)
class MCPSettings:
    """MCP configuration settings loaded from the environment."""

    # Google settings
    client_id: str
    client_secret: str
    redirect_uri: str | None = None
    refresh_token: str | None = None
    default_timezone: str = DEFAULT_TIMEZONE

    # HTTP transport settings
    calendar_mcp_url: str = DEFAULT_MCP_URL
    agent_hmac_secret: str | None = None
    redis_url: str | None = None

    log_level: str = "INFO"


class Config:
    """Singleton configuration manager for the calendar MCP."""

    _instance = None
    _settings: MCPSettings | None = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_settings(self) -> MCPSettings:
        """Get settings, loading from the environment if not already cached."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    def reset(self) -> None:
        """Drop cached settings so the next access re-reads the environment."""
        self._settings = None

    def _load_settings(self) -> MCPSettings:
        # Load secrets
        secrets = get_parameters(
            ["client_id", "client_secret", "refresh_token", "agent_hmac_secret"]
        )

        # Load plain parameters
        params = get_parameters(
            ["redirect_uri", "default_timezone", "calendar_mcp_url", "redis_url", "log_level"]
        )

        settings = MCPSettings(
            client_id=secrets["client_id"] or "",
            client_secret=secrets["client_secret"] or "",
            redirect_uri=params["redirect_uri"],
            refresh_token=secrets["refresh_token"],
            default_timezone=params["default_timezone"] or DEFAULT_TIMEZONE,
            calendar_mcp_url=(params["calendar_mcp_url"] or DEFAULT_MCP_URL).rstrip("/"),
            agent_hmac_secret=secrets["agent_hmac_secret"],
            redis_url=params["redis_url"],
            log_level=(params["log_level"] or "INFO").upper(),
        )

        self._validate_settings(settings)
        return settings

    def _validate_settings(self, settings: MCPSettings) -> None:
        """Validate that all required settings have values."""
        required_fields = ["client_id", "client_secret"]
        missing = [field.upper() for field in required_fields if not getattr(settings, field)]
        if missing:
            raise StartupError(f"{' and '.join(missing)} environment variables are required")


# Create singleton instance
config = Config()


def get_settings() -> MCPSettings:
    """Get settings from the singleton config."""
    return config.get_settings()


def reset_settings() -> None:
    config.reset()
