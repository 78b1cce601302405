from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from mcp_calendar.app.config import DEFAULT_TIMEZONE, MCPSettings, get_settings
from mcp_calendar.auth.google_oauth import CredentialProvider, credential_provider
from mcp_calendar.mcp.arguments import ValidationError, parse_arguments
from mcp_calendar.mcp.schemas import LIST, TOOLS
from mcp_calendar.tools.calendar import CalendarContext, run_operation
from mcp_calendar.tools.results import Err, Ok

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResponse:
    """The single envelope produced for every tool invocation."""

    text: str
    is_error: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


def _error(message: str) -> ToolResponse:
    return ToolResponse(f"Error: {message}", is_error=True)


def list_tools() -> list[dict[str, Any]]:
    return [tool.as_dict() for tool in TOOLS]


def _context(
    provider: CredentialProvider | None, settings: MCPSettings | None
) -> CalendarContext:
    if provider is None:
        settings = settings or get_settings()
        provider = credential_provider(settings)
    time_zone = settings.default_timezone if settings else DEFAULT_TIMEZONE
    return CalendarContext(provider=provider, time_zone=time_zone)


def call_tool(
    name: str,
    args: Mapping[str, Any] | None,
    *,
    provider: CredentialProvider | None = None,
    settings: MCPSettings | None = None,
) -> ToolResponse:
    """
    Route a named invocation to its calendar operation and wrap the outcome.

    Never raises: missing arguments, unknown tool names, invalid arguments, failed
    provider calls and unexpected errors all come back as an error envelope.

    Args:
        name (str): Tool name, the routing key.
        args (Mapping[str, Any] | None): The invocation's argument bag.
        provider (CredentialProvider | None): Client source; built from settings if None.
        settings (MCPSettings | None): Explicit settings; loaded from the environment if None.

    Returns:
        ToolResponse: Success or error envelope.
    """
    try:
        logger.info(f"Call tool request received: {name}")
        if not args:
            raise ValidationError("No arguments provided")
        if not isinstance(args, Mapping):
            raise ValidationError("Arguments must be an object")

        if name not in LIST:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResponse(f"Unknown tool: {name}", is_error=True)

        parsed = parse_arguments(name, args)
        result = run_operation(name, parsed, _context(provider, settings))

        match result:
            case Ok(text):
                logger.info(f"{name} succeeded")
                return ToolResponse(text)
            case Err(kind, message):
                logger.error(f"{name} failed ({kind.value}): {message}")
                return _error(message)

        raise TypeError(f"Unexpected result from {name}: {result!r}")

    except ValidationError as e:
        logger.warning(f"Rejected {name} request: {e}")
        return _error(str(e))

    except Exception as e:
        logger.exception(f"Error in call tool handler: {e}")
        return _error(str(e) or e.__class__.__name__)
