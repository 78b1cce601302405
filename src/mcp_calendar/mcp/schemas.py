import copy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Mapping[str, Any]

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


def _attendees(description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {"type": "string", "format": "email"},
        "description": description,
    }


CREATE_EVENT = ToolDescriptor(
    name="create_event",
    description="Create a calendar event with specified details",
    input_schema={
        "type": "object",
        "required": ["summary", "start_time", "end_time"],
        "properties": {
            "summary": {"type": "string", "description": "Event title"},
            "start_time": {
                "type": "string",
                "format": "date-time",
                "description": "Start time (ISO format)",
            },
            "end_time": {
                "type": "string",
                "format": "date-time",
                "description": "End time (ISO format)",
            },
            "description": {"type": "string", "description": "Event description"},
            "attendees": _attendees("List of attendee emails"),
        },
    },
)

LIST_EVENTS = ToolDescriptor(
    name="list_events",
    description="List calendar events in a specified time range",
    input_schema={
        "type": "object",
        "required": ["time_min", "time_max"],
        "properties": {
            "time_min": {
                "type": "string",
                "format": "date-time",
                "description": "Start time for event search (ISO format)",
            },
            "time_max": {
                "type": "string",
                "format": "date-time",
                "description": "End time for event search (ISO format)",
            },
            "max_results": {
                "type": "integer",
                "minimum": 1,
                "description": "Maximum number of events to return",
            },
        },
    },
)

UPDATE_EVENT = ToolDescriptor(
    name="update_event",
    description="Update an existing calendar event",
    input_schema={
        "type": "object",
        "required": ["event_id"],
        "properties": {
            "event_id": {"type": "string", "description": "ID of the event to update"},
            "summary": {"type": "string", "description": "Updated event title"},
            "start_time": {
                "type": "string",
                "format": "date-time",
                "description": "Updated start time (ISO format)",
            },
            "end_time": {
                "type": "string",
                "format": "date-time",
                "description": "Updated end time (ISO format)",
            },
            "description": {"type": "string", "description": "Updated event description"},
            "attendees": _attendees("Updated list of attendee emails"),
        },
    },
)

DELETE_EVENT = ToolDescriptor(
    name="delete_event",
    description="Delete a calendar event",
    input_schema={
        "type": "object",
        "required": ["event_id"],
        "properties": {
            "event_id": {"type": "string", "description": "ID of the event to delete"},
        },
    },
)

# Discovery order
TOOLS: tuple[ToolDescriptor, ...] = (CREATE_EVENT, LIST_EVENTS, UPDATE_EVENT, DELETE_EVENT)

LIST: Mapping[str, ToolDescriptor] = MappingProxyType({tool.name: tool for tool in TOOLS})
