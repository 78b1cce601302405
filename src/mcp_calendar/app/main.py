import json
import logging
from functools import lru_cache
from typing import Any

from mcp_calendar.app.config import MCPSettings, get_settings
from mcp_calendar.auth.google_oauth import CredentialProvider
from mcp_calendar.auth.hmac_auth import (
    NONCE_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    verify_hmac_signature,
)
from mcp_calendar.mcp.manifest import manifest
from mcp_calendar.mcp.router import ToolResponse, call_tool, list_tools
from mcp_calendar.mcp.schemas import TOOLS
from mcp_calendar.services.redis_services import NonceStore, build_nonce_store

logger = logging.getLogger(__name__)


def create_response(
    status_code: int,
    body: str,
    content_type: str = "text/plain",
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Create a standard HTTP response.

    Args:
        status_code (int): HTTP status code.
        body (str): Response body.
        content_type (str, optional): Content-Type header. Defaults to "text/plain".
        headers (dict[str, str] | None, optional): Additional headers. Defaults to None.

    Returns:
        dict: Standardized response dictionary.
    """
    response_headers = {"Content-Type": content_type}
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "body": body,
        "headers": response_headers,
        "isBase64Encoded": False,
    }


def json_response(payload: Any, status_code: int = 200) -> dict[str, Any]:
    return create_response(status_code, json.dumps(payload), "application/json")


@lru_cache(maxsize=4)
def _nonce_store(redis_url: str | None) -> NonceStore | None:
    return build_nonce_store(redis_url)


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8")
    if isinstance(body, str):
        return body
    return json.dumps(body)


def authenticate(
    method: str,
    route: str,
    headers: dict[str, str],
    body: str,
    settings: MCPSettings,
    nonce_store: NonceStore | None = None,
) -> str | None:
    """
    Check the HMAC headers of a request.

    Returns:
        str | None: None if the request is accepted, otherwise the rejection reason.
    """
    if not settings.agent_hmac_secret:
        logger.debug("AGENT_HMAC_SECRET not set; skipping HMAC check")
        return None

    timestamp = headers.get(TIMESTAMP_HEADER, "")
    nonce = headers.get(NONCE_HEADER, "")
    signature = headers.get(SIGNATURE_HEADER, "")
    if not timestamp or not nonce or not signature:
        return "Missing HMAC headers"

    is_valid, reason = verify_hmac_signature(
        ts_str=timestamp,
        nonce=nonce,
        method=method,
        path_only=route,
        body=body,
        provided_sig_b64=signature,
        secret=settings.agent_hmac_secret,
    )
    if not is_valid:
        return f"Invalid HMAC signature: {reason}"

    # Only burn the nonce once the signature checks out
    if nonce_store is not None and not nonce_store.is_nonce_unique(nonce):
        return "Nonce not unique"

    return None


def _tool_call(
    body: str, settings: MCPSettings, provider: CredentialProvider | None = None
) -> ToolResponse:
    if not body:
        return ToolResponse("Error: Missing body", is_error=True)
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return ToolResponse("Error: Body is not valid JSON", is_error=True)
    if not isinstance(payload, dict):
        return ToolResponse("Error: Body must be a JSON object", is_error=True)

    name = payload.get("name")
    if not name or not isinstance(name, str):
        return ToolResponse("Error: Missing tool name", is_error=True)

    args = payload.get("arguments")
    if isinstance(args, str) and args:
        try:
            args = json.loads(args)
        except json.JSONDecodeError:
            return ToolResponse("Error: Invalid arguments", is_error=True)

    return call_tool(name, args, provider=provider, settings=settings)


def process(
    event: dict[str, Any],
    nonce_store: NonceStore | None = None,
    provider: CredentialProvider | None = None,
) -> dict[str, Any]:
    """Process the incoming HTTP Gateway event."""

    settings = get_settings()
    if nonce_store is None:
        nonce_store = _nonce_store(settings.redis_url)

    # Get the route key and split it into method and route
    route_key = event.get("routeKey", "")
    method, _, route = route_key.partition(" ")
    logger.info(f"Processing request: {method} {route}")

    if not route:
        logger.error("No route found")
        return create_response(404, "Not Found")

    if method not in ["GET", "POST"]:
        logger.error("Invalid method")
        return create_response(404, "Not Found")

    headers = {str(k).lower(): str(v) for k, v in (event.get("headers") or {}).items()}
    try:
        body = _body_text(event.get("body"))
        body_is_text = True
    except UnicodeDecodeError:
        logger.warning("Request body is not valid UTF-8")
        body, body_is_text = "", False

    rejection = authenticate(method, route, headers, body, settings, nonce_store)
    if rejection:
        logger.error(rejection)
        return create_response(401, rejection)

    if method == "GET" and route == "/.well-known/mcp/manifest":
        logger.info("Returning manifest")
        return json_response(manifest(settings.calendar_mcp_url))

    elif method == "GET" and route == "/mcp/schemas":
        logger.info("Returning schemas")
        return json_response({tool.name: tool.as_dict() for tool in TOOLS})

    elif method == "GET" and route == "/mcp/tools":
        logger.info("Returning tools")
        return json_response({"tools": list_tools()})

    elif method == "POST" and route == "/mcp/tools/call":
        logger.info("Tools call received")
        if not body_is_text:
            response = ToolResponse("Error: Body is not valid UTF-8", is_error=True)
        else:
            response = _tool_call(body, settings, provider)
        return json_response(response.as_dict())

    # Default case for unmatched routes
    return create_response(404, "Route and method not Found")
