from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from mcp_calendar.app.config import CALENDAR_ID, DEFAULT_TIMEZONE
from mcp_calendar.auth.google_oauth import CredentialProvider, CredentialsError
from mcp_calendar.mcp.arguments import (
    CreateEventArgs,
    DeleteEventArgs,
    ListEventsArgs,
    ToolArgs,
    UpdateEventArgs,
)
from mcp_calendar.tools.results import Err, ErrorKind, Ok, ToolResult

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = "No events found in the specified time range."


@dataclass(frozen=True)
class CalendarContext:
    """What an operation needs beyond its arguments: a client source and the event time zone."""

    provider: CredentialProvider
    time_zone: str = DEFAULT_TIMEZONE

    def service(self) -> Any:
        return self.provider()


def _error_reason(error: Exception) -> str:
    if isinstance(error, HttpError):
        return f"{error.reason} (HTTP {error.resp.status})"
    return str(error) or error.__class__.__name__


def _failure(verb: str, error: Exception) -> Err:
    kind = ErrorKind.OPERATION
    if isinstance(error, (CredentialsError, GoogleAuthError)):
        kind = ErrorKind.AUTH
    message = f"Failed to {verb} event: {_error_reason(error)}"
    logger.error(message)
    return Err(kind, message)


def _timed(value: str, time_zone: str) -> dict[str, str]:
    return {"dateTime": value, "timeZone": time_zone}


def _attendee_records(emails: list[str]) -> list[dict[str, str]]:
    return [{"email": email} for email in emails]


def _when(moment: dict[str, Any] | None) -> str:
    if not moment:
        return ""
    return moment.get("dateTime") or moment.get("date") or ""


def build_event_body(args: CreateEventArgs, time_zone: str) -> dict[str, Any]:
    event: dict[str, Any] = {
        "summary": args.summary,
        "start": _timed(args.start_time, time_zone),
        "end": _timed(args.end_time, time_zone),
    }
    if args.description is not None:
        event["description"] = args.description
    if args.attendees is not None:
        event["attendees"] = _attendee_records(args.attendees)
    return event


def merge_event_update(
    current: dict[str, Any], args: UpdateEventArgs, time_zone: str
) -> dict[str, Any]:
    """
    Overlay the supplied update fields onto the fetched event.

    Fields left as None in `args` keep their stored value. Attendees, when supplied,
    replace the stored list rather than extending it.
    """
    event = dict(current)
    if args.summary is not None:
        event["summary"] = args.summary
    if args.description is not None:
        event["description"] = args.description
    if args.start_time is not None:
        event["start"] = _timed(args.start_time, time_zone)
    if args.end_time is not None:
        event["end"] = _timed(args.end_time, time_zone)
    if args.attendees is not None:
        event["attendees"] = _attendee_records(args.attendees)
    return event


def format_events(events: list[dict[str, Any]]) -> str:
    if not events:
        return NO_EVENTS_MESSAGE

    entries = [
        f"{index}. {event.get('summary') or '(no title)'} (ID: {event.get('id')})\n"
        f"   Start: {_when(event.get('start'))}\n"
        f"   End: {_when(event.get('end'))}\n"
        f"   Link: {event.get('htmlLink', '')}\n"
        for index, event in enumerate(events, start=1)
    ]
    return "Events:\n\n" + "\n".join(entries)


def create_event(args: CreateEventArgs, ctx: CalendarContext) -> ToolResult:
    try:
        svc = ctx.service()
        event = build_event_body(args, ctx.time_zone)
        logger.debug(f"Inserting event: {event}")
        created = svc.events().insert(calendarId=CALENDAR_ID, body=event).execute()
    except Exception as e:
        return _failure("create", e)

    logger.info(f"Event created: {created.get('id')}")
    return Ok(f"Event created: {created.get('htmlLink')}")


def list_events(args: ListEventsArgs, ctx: CalendarContext) -> ToolResult:
    params: dict[str, Any] = {
        "calendarId": CALENDAR_ID,
        "timeMin": args.time_min,
        "timeMax": args.time_max,
        "singleEvents": True,
        "orderBy": "startTime",
    }
    if args.max_results is not None:
        params["maxResults"] = args.max_results

    try:
        svc = ctx.service()
        logger.debug(f"Listing events with params: {params}")
        response = svc.events().list(**params).execute()
    except Exception as e:
        return _failure("list", e)

    events = response.get("items", [])
    logger.info(f"Found {len(events)} events")
    return Ok(format_events(events))


def update_event(args: UpdateEventArgs, ctx: CalendarContext) -> ToolResult:
    try:
        svc = ctx.service()
        current = svc.events().get(calendarId=CALENDAR_ID, eventId=args.event_id).execute()
        event = merge_event_update(current, args, ctx.time_zone)
        logger.debug(f"Updating event {args.event_id} with: {event}")
        updated = (
            svc.events()
            .update(calendarId=CALENDAR_ID, eventId=args.event_id, body=event)
            .execute()
        )
    except Exception as e:
        return _failure("update", e)

    logger.info(f"Event updated: {args.event_id}")
    return Ok(f"Event updated: {updated.get('htmlLink')}")


def delete_event(args: DeleteEventArgs, ctx: CalendarContext) -> ToolResult:
    try:
        svc = ctx.service()
        svc.events().delete(calendarId=CALENDAR_ID, eventId=args.event_id).execute()
    except Exception as e:
        return _failure("delete", e)

    logger.info(f"Event deleted: {args.event_id}")
    return Ok(f"Event {args.event_id} deleted successfully.")


Operation = Callable[[Any, CalendarContext], ToolResult]

OPERATIONS: dict[str, Operation] = {
    "create_event": create_event,
    "list_events": list_events,
    "update_event": update_event,
    "delete_event": delete_event,
}


def run_operation(name: str, args: ToolArgs, ctx: CalendarContext) -> ToolResult:
    operation = OPERATIONS.get(name)
    if operation is None:
        return Err(ErrorKind.VALIDATION, f"Unknown tool: {name}")
    return operation(args, ctx)
