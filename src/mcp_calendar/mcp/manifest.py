from mcp_calendar.app.config import SERVER_NAME, SERVER_VERSION


def manifest(base_url: str) -> dict[str, str | dict[str, str]]:
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": "MCP server exposing Google Calendar tools for the primary calendar",
        "tools_endpoint": f"{base_url}/mcp/tools",
        "schema_endpoint": f"{base_url}/mcp/schemas",
        "call_endpoint": f"{base_url}/mcp/tools/call",
        "auth": {"type": "hmac"},  # HMAC auth: timestamp/nonce/signature headers
    }
