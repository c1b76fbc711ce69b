"""Hours reports for members and departments."""

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Any

from . import aggregate
from .aggregate import UserTotal
from .store import SessionStore
from .timeutil import (
    Window,
    current_month_range,
    current_week_range,
    format_hours,
    week_range_for_offset,
)


@dataclass
class MemberHours:
    """A member's monthly, weekly, and all-time worked time in ms."""

    guild_id: str
    user_id: str
    month: Window
    month_total: int
    weeks: list[tuple[Window, int]]
    all_time_total: int

    def render(self) -> str:
        lines = [f"**Monthly Hours:** {format_hours(self.month_total)} hours", ""]
        lines.append("**Weekly Hours:**")
        for offset, (_, total) in enumerate(self.weeks):
            if offset == 0:
                lines.append(f"• **Week 0 (current):** {format_hours(total)} hours")
            else:
                lines.append(f"• Week {offset}: {format_hours(total)} hours")
        lines.append("")
        lines.append(f"**All-Time Total:** {format_hours(self.all_time_total)} hours")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "guild_id": self.guild_id,
            "user_id": self.user_id,
            "month": {"start_ms": self.month.start_ms, "end_ms": self.month.end_ms,
                      "total_ms": self.month_total},
            "weeks": [
                {"offset": i, "start_ms": w.start_ms, "end_ms": w.end_ms, "total_ms": t}
                for i, (w, t) in enumerate(self.weeks)
            ],
            "all_time_ms": self.all_time_total,
            "text": self.render(),
        }


@dataclass
class DepartmentHours:
    """A department's monthly total and this week's per-member totals."""

    guild_id: str
    department_id: str
    month: Window
    month_total: int
    week: Window
    week_rows: list[UserTotal] = field(default_factory=list)

    def render(self) -> str:
        if self.week_rows:
            weekly = "\n".join(
                f"<@{row.user_id}>: **{format_hours(row.total)} hours**"
                for row in self.week_rows
            )
        else:
            weekly = "_No hours this week._"
        return (
            f"**Monthly Total:** {format_hours(self.month_total)} hours\n\n"
            f"**Weekly Hours:**\n{weekly}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "guild_id": self.guild_id,
            "department_id": self.department_id,
            "month": {"start_ms": self.month.start_ms, "end_ms": self.month.end_ms,
                      "total_ms": self.month_total},
            "week": {"start_ms": self.week.start_ms, "end_ms": self.week.end_ms},
            "week_totals": [
                {"user_id": row.user_id, "total_ms": row.total} for row in self.week_rows
            ],
            "text": self.render(),
        }


def member_hours(
    store: SessionStore,
    guild_id: str,
    user_id: str,
    now: int,
    tz: tzinfo = timezone.utc,
    weeks: int = 8,
) -> MemberHours:
    """Build a member's hours report as of ``now``."""
    sessions = store.list_sessions()
    month = current_month_range(now, tz)
    week_totals = []
    for offset in range(weeks):
        window = week_range_for_offset(offset, now, tz)
        total = aggregate.user_total_in_range(sessions, guild_id, user_id, *window)
        week_totals.append((window, total))

    return MemberHours(
        guild_id=guild_id,
        user_id=user_id,
        month=month,
        month_total=aggregate.user_total_in_range(sessions, guild_id, user_id, *month),
        weeks=week_totals,
        all_time_total=aggregate.user_total_all_time(sessions, guild_id, user_id),
    )


def department_hours(
    store: SessionStore,
    guild_id: str,
    department_id: str,
    now: int,
    tz: tzinfo = timezone.utc,
) -> DepartmentHours:
    """Build a department's hours report as of ``now``."""
    sessions = store.list_sessions()
    month = current_month_range(now, tz)
    week = current_week_range(now, tz)
    return DepartmentHours(
        guild_id=guild_id,
        department_id=department_id,
        month=month,
        month_total=aggregate.department_total_in_range(
            sessions, guild_id, department_id, *month
        ),
        week=week,
        week_rows=aggregate.department_totals_by_user_in_range(
            sessions, guild_id, department_id, *week
        ),
    )
