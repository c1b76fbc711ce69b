"""Duration formatting and calendar-aligned time windows.

Every function takes the current time explicitly as ``now_ms`` so callers
stay deterministic. Boundaries are computed in the given timezone, which
defaults to UTC.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple

MS_PER_SECOND = 1000
MS_PER_HOUR = 3_600_000
WEEK_MS = 7 * 24 * MS_PER_HOUR


class Window(NamedTuple):
    """Half-open interval ``[start_ms, end_ms)``."""

    start_ms: int
    end_ms: int

    def contains(self, ts: int) -> bool:
        return self.start_ms <= ts < self.end_ms

    def shifted(self, delta_ms: int) -> "Window":
        return Window(self.start_ms + delta_ms, self.end_ms + delta_ms)


def format_duration(ms: int) -> str:
    """Format milliseconds as ``"1h 2m 3s"``, dropping sub-second remainder."""
    s = max(ms, 0) // MS_PER_SECOND
    h, rem = divmod(s, 3600)
    m, sec = divmod(rem, 60)
    return f"{h}h {m}m {sec}s"


def format_hours(ms: int) -> str:
    """Format milliseconds as decimal hours with two places, e.g. ``"1.50"``."""
    return f"{ms / MS_PER_HOUR:.2f}"


def chat_timestamp(ms: int, style: str = "f") -> str:
    """Chat-platform timestamp markup that renders in the reader's locale."""
    return f"<t:{ms // MS_PER_SECOND}:{style}>"


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _local_date(now: int, tz: tzinfo) -> date:
    return datetime.fromtimestamp(now / 1000, tz).date()


def _midnight_ms(day: date, tz: tzinfo) -> int:
    return int(datetime.combine(day, time.min, tzinfo=tz).timestamp() * 1000)


def current_month_range(now: int, tz: tzinfo = timezone.utc) -> Window:
    """First instant of this calendar month to the first instant of the next."""
    today = _local_date(now, tz)
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return Window(_midnight_ms(start, tz), _midnight_ms(end, tz))


def current_week_range(now: int, tz: tzinfo = timezone.utc) -> Window:
    """Most recent Sunday 00:00 to the following Sunday 00:00."""
    today = _local_date(now, tz)
    # date.weekday() is Monday=0 .. Sunday=6
    sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return Window(
        _midnight_ms(sunday, tz),
        _midnight_ms(sunday + timedelta(days=7), tz),
    )


def week_range_for_offset(
    offset: int, now: int, tz: tzinfo = timezone.utc
) -> Window:
    """The current week shifted back by ``offset`` whole weeks.

    The shift is fixed ``7 * 24h`` arithmetic, not a re-derived calendar
    week, so consecutive offsets always tile without gaps.
    """
    if offset < 0:
        raise ValueError(f"Week offset must be non-negative, got {offset}")
    return current_week_range(now, tz).shifted(-offset * WEEK_MS)
