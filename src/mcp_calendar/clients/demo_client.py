import json
import os
from typing import Any

import requests

from mcp_calendar.auth.hmac_auth import sign_request

BASE = os.getenv("CALENDAR_MCP_URL", "http://localhost:8000")
SECRET = os.getenv("AGENT_HMAC_SECRET")

_TIMEOUT = 30


class MCPCalendarClient:
    """Minimal HTTP client for the calendar MCP, signing requests when a secret is set."""

    def __init__(
        self,
        base_url: str = BASE,
        hmac_secret: str | None = SECRET,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.hmac_secret = hmac_secret
        self.session = session or requests.Session()

    def _headers(self, method: str, path: str, body: str) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if body:
            headers["Content-Type"] = "application/json"
        if self.hmac_secret:
            headers.update(sign_request(method, path, body, self.hmac_secret))
        return headers

    def _get(self, path: str) -> Any:
        r = self.session.get(
            f"{self.base_url}{path}", headers=self._headers("GET", path, ""), timeout=_TIMEOUT
        )
        r.raise_for_status()
        return r.json()

    def manifest(self) -> dict[str, Any]:
        return self._get("/.well-known/mcp/manifest")

    def list_tools(self) -> list[dict[str, Any]]:
        return self._get("/mcp/tools").get("tools", [])

    def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        path = "/mcp/tools/call"
        # Sign exactly the bytes that are sent
        body = json.dumps({"name": name, "arguments": arguments})
        r = self.session.post(
            f"{self.base_url}{path}",
            data=body.encode("utf-8"),
            headers=self._headers("POST", path, body),
            timeout=_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()


if __name__ == "__main__":
    client = MCPCalendarClient()
    print(json.dumps(client.list_tools(), indent=2))
    print(
        json.dumps(
            client.call_tool(
                "list_events",
                {
                    "time_min": "2025-10-08T08:00:00+09:00",
                    "time_max": "2025-10-08T18:00:00+09:00",
                    "max_results": 10,
                },
            ),
            indent=2,
        )
    )
