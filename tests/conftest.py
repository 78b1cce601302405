"""Shared fixtures: an in-memory Calendar v3 service double and settings helpers."""

from __future__ import annotations

import copy
import itertools
import json
from typing import Any, Callable

import httplib2
import pytest
from googleapiclient.errors import HttpError

from mcp_calendar.app.config import MCPSettings, reset_settings

ENV_VARS = [
    "CLIENT_ID",
    "CLIENT_SECRET",
    "REDIRECT_URI",
    "REFRESH_TOKEN",
    "DEFAULT_TIMEZONE",
    "CALENDAR_MCP_URL",
    "AGENT_HMAC_SECRET",
    "REDIS_URL",
    "LOG_LEVEL",
]


def http_error(status: int, message: str) -> HttpError:
    resp = httplib2.Response({"status": status, "reason": message})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class _Request:
    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn

    def execute(self) -> Any:
        return self._fn()


class FakeCalendarService:
    """Mimics the slice of `build("calendar", "v3")` used by the tools."""

    def __init__(self, events: list[dict[str, Any]] | None = None) -> None:
        self.store: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._ids = itertools.count(1)
        for event in events or []:
            self.store[event["id"]] = copy.deepcopy(event)

    def events(self) -> "FakeCalendarService":
        return self

    def _link(self, event_id: str) -> str:
        return f"https://calendar.google.com/event?eid={event_id}"

    def _lookup(self, event_id: str) -> dict[str, Any]:
        if event_id not in self.store:
            raise http_error(404, "Not Found")
        return self.store[event_id]

    def insert(self, **kwargs: Any) -> _Request:
        self.calls.append(("insert", copy.deepcopy(kwargs)))

        def run() -> dict[str, Any]:
            event_id = f"evt{next(self._ids)}"
            event = {**copy.deepcopy(kwargs["body"]), "id": event_id, "htmlLink": self._link(event_id)}
            self.store[event_id] = event
            return copy.deepcopy(event)

        return _Request(run)

    def list(self, **kwargs: Any) -> _Request:
        self.calls.append(("list", copy.deepcopy(kwargs)))

        def run() -> dict[str, Any]:
            def start(event: dict[str, Any]) -> str:
                return event["start"].get("dateTime") or event["start"].get("date")

            items = [
                copy.deepcopy(event)
                for event in sorted(self.store.values(), key=start)
                if kwargs["timeMin"] <= start(event) < kwargs["timeMax"]
            ]
            if "maxResults" in kwargs:
                items = items[: kwargs["maxResults"]]
            return {"kind": "calendar#events", "items": items}

        return _Request(run)

    def get(self, **kwargs: Any) -> _Request:
        self.calls.append(("get", copy.deepcopy(kwargs)))
        return _Request(lambda: copy.deepcopy(self._lookup(kwargs["eventId"])))

    def update(self, **kwargs: Any) -> _Request:
        self.calls.append(("update", copy.deepcopy(kwargs)))

        def run() -> dict[str, Any]:
            event_id = kwargs["eventId"]
            self._lookup(event_id)
            event = {**copy.deepcopy(kwargs["body"]), "id": event_id, "htmlLink": self._link(event_id)}
            self.store[event_id] = event
            return copy.deepcopy(event)

        return _Request(run)

    def delete(self, **kwargs: Any) -> _Request:
        self.calls.append(("delete", copy.deepcopy(kwargs)))

        def run() -> str:
            self._lookup(kwargs["eventId"])
            del self.store[kwargs["eventId"]]
            return ""

        return _Request(run)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from the host environment and cached settings."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> MCPSettings:
    return MCPSettings(client_id="client-id", client_secret="client-secret", refresh_token="rt")


@pytest.fixture
def stored_event() -> dict[str, Any]:
    return {
        "id": "abc123",
        "summary": "Design review",
        "description": "Quarterly planning",
        "start": {"dateTime": "2025-10-08T10:00:00+09:00", "timeZone": "Asia/Seoul"},
        "end": {"dateTime": "2025-10-08T11:00:00+09:00", "timeZone": "Asia/Seoul"},
        "attendees": [{"email": "a@x.com"}, {"email": "b@y.com"}],
        "location": "Room 4",
        "htmlLink": "https://calendar.google.com/event?eid=abc123",
    }


@pytest.fixture
def service(stored_event: dict[str, Any]) -> FakeCalendarService:
    return FakeCalendarService([stored_event])


@pytest.fixture
def provider(service: FakeCalendarService) -> Callable[[], FakeCalendarService]:
    return lambda: service


@pytest.fixture
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLIENT_ID", "client-id")
    monkeypatch.setenv("CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("REFRESH_TOKEN", "rt")
