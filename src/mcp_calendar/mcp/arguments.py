from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from mcp_calendar.mcp.schemas import LIST


class ValidationError(Exception):
    """An invocation cannot be routed or its arguments are unusable."""


class ArgumentValidationError(ValidationError):
    pass


@dataclass(frozen=True)
class CreateEventArgs:
    summary: str
    start_time: str
    end_time: str
    description: str | None = None
    attendees: list[str] | None = None


@dataclass(frozen=True)
class ListEventsArgs:
    time_min: str
    time_max: str
    max_results: int | None = None


@dataclass(frozen=True)
class UpdateEventArgs:
    event_id: str
    summary: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    description: str | None = None
    attendees: list[str] | None = None


@dataclass(frozen=True)
class DeleteEventArgs:
    event_id: str


ToolArgs = CreateEventArgs | ListEventsArgs | UpdateEventArgs | DeleteEventArgs


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _require(name: str, bag: Mapping[str, Any]) -> None:
    missing = [field for field in LIST[name].required if not _is_present(bag.get(field))]
    if missing:
        raise ArgumentValidationError(f"Missing required arguments: {', '.join(missing)}")


def _optional_str(bag: Mapping[str, Any], field: str) -> str | None:
    value = bag.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArgumentValidationError(f"Argument '{field}' must be a string")
    return value


def _required_str(bag: Mapping[str, Any], field: str) -> str:
    value = _optional_str(bag, field)
    assert value is not None  # checked by _require
    return value.strip()


def _optional_time(bag: Mapping[str, Any], field: str) -> str | None:
    # Blank times mean "leave unchanged"
    value = _optional_str(bag, field)
    if value is None:
        return None
    return value.strip() or None


def _attendees(bag: Mapping[str, Any]) -> list[str] | None:
    attendees = bag.get("attendees")
    if attendees is None:
        return None
    if isinstance(attendees, str):
        attendees = attendees.split(",")
    if not isinstance(attendees, (list, tuple)):
        raise ArgumentValidationError("Argument 'attendees' must be a list of email addresses")
    emails = []
    for email in attendees:
        if not isinstance(email, str):
            raise ArgumentValidationError("Argument 'attendees' must be a list of email addresses")
        if email.strip():
            emails.append(email.strip())
    return emails


def _max_results(bag: Mapping[str, Any]) -> int | None:
    value = bag.get("max_results")
    if value is None or value == "":
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ArgumentValidationError("Argument 'max_results' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ArgumentValidationError("Argument 'max_results' must be an integer") from None
    if isinstance(value, float) and number != value:
        raise ArgumentValidationError("Argument 'max_results' must be an integer")
    if number < 1:
        raise ArgumentValidationError("Argument 'max_results' must be at least 1")
    return number


def _create_event(bag: Mapping[str, Any]) -> CreateEventArgs:
    return CreateEventArgs(
        summary=_required_str(bag, "summary"),
        start_time=_required_str(bag, "start_time"),
        end_time=_required_str(bag, "end_time"),
        description=_optional_str(bag, "description"),
        attendees=_attendees(bag),
    )


def _list_events(bag: Mapping[str, Any]) -> ListEventsArgs:
    return ListEventsArgs(
        time_min=_required_str(bag, "time_min"),
        time_max=_required_str(bag, "time_max"),
        max_results=_max_results(bag),
    )


def _update_event(bag: Mapping[str, Any]) -> UpdateEventArgs:
    return UpdateEventArgs(
        event_id=_required_str(bag, "event_id"),
        summary=_optional_str(bag, "summary"),
        start_time=_optional_time(bag, "start_time"),
        end_time=_optional_time(bag, "end_time"),
        description=_optional_str(bag, "description"),
        attendees=_attendees(bag),
    )


def _delete_event(bag: Mapping[str, Any]) -> DeleteEventArgs:
    return DeleteEventArgs(event_id=_required_str(bag, "event_id"))


_PARSERS: dict[str, Callable[[Mapping[str, Any]], ToolArgs]] = {
    "create_event": _create_event,
    "list_events": _list_events,
    "update_event": _update_event,
    "delete_event": _delete_event,
}


def parse_arguments(name: str, bag: Mapping[str, Any]) -> ToolArgs:
    """
    Check an argument bag against the tool's schema and build its typed record.

    Args:
        name (str): Registered tool name.
        bag (Mapping[str, Any]): Arguments supplied with the invocation.

    Returns:
        ToolArgs: The per-tool argument record.

    Raises:
        ValidationError: If the tool is unknown.
        ArgumentValidationError: If required arguments are missing or malformed.
    """
    parser = _PARSERS.get(name)
    if parser is None:
        raise ValidationError(f"Unknown tool: {name}")
    _require(name, bag)
    return parser(bag)
