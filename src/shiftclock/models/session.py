"""Work session model for shiftclock."""

import random
import string
from dataclasses import dataclass
from typing import Any, NamedTuple

SCHEMA_VERSION = 1

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _new_session_id(now_ms: int) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=11))
    return f"{now_ms}_{suffix}"


class CloseResult(NamedTuple):
    """Worked and break milliseconds of a session that was just closed."""

    worked: int
    break_total: int


@dataclass
class Session:
    """One continuous clocked-in engagement for a user in a department.

    All timestamps and durations are integer milliseconds since the epoch.
    """

    id: str
    guild_id: str
    user_id: str
    department_id: str
    clock_in: int
    clock_out: int | None = None
    duration: int | None = None
    on_break: bool = False
    break_start: int | None = None
    total_break: int = 0

    @classmethod
    def create(
        cls,
        guild_id: str,
        user_id: str,
        department_id: str,
        clock_in: int,
    ) -> "Session":
        """Create a new open session with no break state."""
        return cls(
            id=_new_session_id(clock_in),
            guild_id=guild_id,
            user_id=user_id,
            department_id=department_id,
            clock_in=clock_in,
        )

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.guild_id, self.user_id, self.department_id)

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    def begin_break(self, now: int) -> None:
        self.on_break = True
        self.break_start = now

    def finish_break(self, now: int) -> int:
        """End the current break and fold it into ``total_break``.

        Returns the length of the break that was just ended. A break end
        stamped before its start counts as zero so the total never shrinks.
        """
        length = 0
        if self.break_start is not None:
            length = max(now - self.break_start, 0)
        self.total_break += length
        self.on_break = False
        self.break_start = None
        return length

    def close(self, clock_out: int) -> CloseResult:
        """Close the session, ending any break in progress first."""
        if self.on_break:
            self.finish_break(clock_out)
        self.on_break = False
        self.break_start = None
        self.clock_out = clock_out
        self.duration = max(clock_out - self.clock_in - self.total_break, 0)
        return CloseResult(worked=self.duration, break_total=self.total_break)

    def to_dict(self) -> dict[str, Any]:
        """Convert session to its persisted layout."""
        return {
            "id": self.id,
            "guildId": self.guild_id,
            "userId": self.user_id,
            "departmentId": self.department_id,
            "clockIn": self.clock_in,
            "clockOut": self.clock_out,
            "duration": self.duration,
            "onBreak": self.on_break,
            "breakStart": self.break_start,
            "totalBreak": self.total_break,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """Create a Session from its persisted layout.

        Records written before break tracking existed have no ``onBreak`` or
        ``totalBreak``; those default to ``False`` and ``0`` here and nowhere
        else.
        """
        return cls(
            id=str(data["id"]),
            guild_id=str(data["guildId"]),
            user_id=str(data["userId"]),
            department_id=str(data["departmentId"]),
            clock_in=int(data["clockIn"]),
            clock_out=_optional_int(data.get("clockOut")),
            duration=_optional_int(data.get("duration")),
            on_break=bool(data.get("onBreak") or False),
            break_start=_optional_int(data.get("breakStart")),
            total_break=int(data.get("totalBreak") or 0),
        )


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def load_document(data: dict[str, Any]) -> list[Session]:
    """Parse a persisted ``{"sessions": [...]}`` document.

    Documents without a ``version`` key were written by the first release and
    share the version 1 layout.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Session document must be an object, got {type(data).__name__}")
    version = data.get("version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported session document version: {version}")
    sessions = data.get("sessions", [])
    if not isinstance(sessions, list):
        raise ValueError("Session document \"sessions\" must be a list")
    return [Session.from_dict(s) for s in sessions]


def dump_document(sessions: list[Session]) -> dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "sessions": [s.to_dict() for s in sessions],
    }
