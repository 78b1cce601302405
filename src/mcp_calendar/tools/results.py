"""
Outcome types returned by calendar operations.

Operations never raise to their caller; they return either `Ok` carrying the
human-readable result text or `Err` carrying a failure kind and message.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    OPERATION = "operation"
    AUTH = "auth"


@dataclass(frozen=True)
class Ok:
    text: str


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


ToolResult = Ok | Err
