from typing import Any, Callable

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from mcp_calendar.app.config import MCPSettings

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = ["https://www.googleapis.com/auth/calendar"]

# Zero-argument callable returning a ready Calendar v3 service
CredentialProvider = Callable[[], Any]


class CredentialsError(Exception):
    """No usable Google credentials could be built from configuration."""


def get_creds(settings: MCPSettings) -> Credentials:
    if not settings.refresh_token:
        raise CredentialsError("REFRESH_TOKEN is not configured; link a Google account first")
    return Credentials(
        None,
        refresh_token=settings.refresh_token,
        token_uri=TOKEN_URI,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        scopes=SCOPES,
    )


def acquire_client(settings: MCPSettings) -> Any:
    """
    Build an authenticated Google Calendar v3 service.

    Called fresh for every operation; the access token is refreshed from the
    configured refresh token on first use.
    """
    creds = get_creds(settings)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def credential_provider(settings: MCPSettings) -> CredentialProvider:
    def provider() -> Any:
        return acquire_client(settings)

    return provider
