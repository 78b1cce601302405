import os
from typing import Any

from mcp_calendar.app.config import StartupError
from mcp_calendar.app.main import create_response, process
from mcp_calendar.infrastructure.platform_manager import create_logger

logger = create_logger(log_level=os.getenv("LOG_LEVEL", "INFO"))


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for the Calendar MCP."""
    try:
        return process(event)
    except StartupError as e:
        logger.critical(f"Configuration error: {e}")
        return create_response(500, "Server is not configured")
    except Exception as e:
        logger.exception(f"Error in processing Calendar MCP request: {e}")
        return create_response(500, "Internal Server Error")
