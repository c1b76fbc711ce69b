"""Aggregation of closed session durations.

Only closed sessions count. Windowed queries attribute a session to the
period in which it was clocked out, using half-open ``[start_ms, end_ms)``
windows.
"""

from typing import Iterable, NamedTuple

from .models import Session


class UserTotal(NamedTuple):
    user_id: str
    total: int


def _closed(sessions: Iterable[Session], guild_id: str) -> Iterable[Session]:
    return (
        s
        for s in sessions
        if s.guild_id == guild_id and s.duration is not None and s.clock_out is not None
    )


def _in_window(session: Session, start_ms: int, end_ms: int) -> bool:
    return start_ms <= session.clock_out < end_ms


def user_total_all_time(
    sessions: Iterable[Session], guild_id: str, user_id: str
) -> int:
    """Total worked ms for a user across every department."""
    return sum(s.duration for s in _closed(sessions, guild_id) if s.user_id == user_id)


def user_total_in_range(
    sessions: Iterable[Session],
    guild_id: str,
    user_id: str,
    start_ms: int,
    end_ms: int,
) -> int:
    """Total worked ms for a user in sessions closed within the window."""
    return sum(
        s.duration
        for s in _closed(sessions, guild_id)
        if s.user_id == user_id and _in_window(s, start_ms, end_ms)
    )


def department_total_in_range(
    sessions: Iterable[Session],
    guild_id: str,
    department_id: str,
    start_ms: int,
    end_ms: int,
) -> int:
    """Total worked ms for all members of a department within the window."""
    return sum(
        s.duration
        for s in _closed(sessions, guild_id)
        if s.department_id == department_id and _in_window(s, start_ms, end_ms)
    )


def department_totals_by_user_in_range(
    sessions: Iterable[Session],
    guild_id: str,
    department_id: str,
    start_ms: int,
    end_ms: int,
) -> list[UserTotal]:
    """Per-user totals for a department, largest first.

    Users with equal totals keep the order in which they first appear.
    """
    totals: dict[str, int] = {}
    for s in _closed(sessions, guild_id):
        if s.department_id == department_id and _in_window(s, start_ms, end_ms):
            totals[s.user_id] = totals.get(s.user_id, 0) + s.duration

    rows = [UserTotal(user_id, total) for user_id, total in totals.items()]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows
