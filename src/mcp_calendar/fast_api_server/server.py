# HTTP bridge for the MCP handler.
# Run with: uvicorn mcp_calendar.fast_api_server.server:app --port 8000
# or:       mcp-calendar http --port 8000


import base64
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from mcp_calendar.handler import lambda_handler


def _lambda_to_fastapi_response(lambda_resp: dict[str, Any]) -> Response:
    """
    Convert an AWS Lambda-style proxy response into a FastAPI Response.

    Args:
        lambda_resp (dict): A dict like:
            {
                "statusCode": int,
                "headers": {"Content-Type": str, ...},
                "body": str,
                "isBase64Encoded": bool
            }

    Returns:
        Response: A FastAPI-compatible Response object.
    """
    status_code = lambda_resp.get("statusCode", 200)
    content_type = lambda_resp.get("headers", {}).get("Content-Type", "text/plain")
    body = lambda_resp.get("body", "")

    if lambda_resp.get("isBase64Encoded", False):
        body = base64.b64decode(body)

    return Response(content=body, status_code=status_code, media_type=content_type)


def _process_request(body: bytes, request: Request) -> Response:
    """Convert a FastAPI request to a Lambda-style event."""
    path = request.url.path
    method = request.method
    route_key = f"{method} {path}"

    event = {
        "routeKey": route_key,
        "rawPath": path,
        "body": body,
        "isBase64Encoded": False,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params),
        "requestContext": {"routeKey": route_key, "http": {"method": method, "path": path}},
    }
    return _lambda_to_fastapi_response(lambda_handler(event, None))


app: FastAPI = FastAPI(title="Calendar MCP Service")


# --- MCP Discovery and Tools ---
# Handlers run in the threadpool; nonce checks and provider calls block
@app.get("/.well-known/mcp/manifest")
async def manifest(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.get("/mcp/schemas")
async def schemas(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.get("/mcp/tools")
async def tools(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.post("/mcp/tools/call")
async def tools_call(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}
