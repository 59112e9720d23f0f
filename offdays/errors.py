"""
Error types raised by the classification engine.

The engine never knows about HTTP; the API layer maps ``ErrorKind`` to a
status code (see ``offdays.api_server.STATUS_BY_KIND``).
"""

from enum import Enum


class ErrorKind(Enum):
    """What went wrong, independent of transport."""
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


class ScheduleError(Exception):
    """Error carrying an ``ErrorKind`` and a user-facing message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def invalid_input(cls, message: str) -> "ScheduleError":
        return cls(ErrorKind.INVALID_INPUT, message)

    @classmethod
    def not_found(cls, message: str) -> "ScheduleError":
        return cls(ErrorKind.NOT_FOUND, message)

    def __repr__(self) -> str:
        return f"ScheduleError({self.kind.value!r}, {self.message!r})"
