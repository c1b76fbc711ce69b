"""Session state machine for clock-in, break, and clock-out events."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum

from . import aggregate
from .errors import NotClockedInError, SessionNotFoundError
from .models import Session
from .notify import COLOR_BREAK, COLOR_CLOCK_IN, COLOR_CLOCK_OUT, Notification
from .store import SessionStore
from .timeutil import chat_timestamp, format_duration, format_hours

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENT_NAME = "Department"
LOCK_STRIPES = 64


class ClockAction(Enum):
    """Inbound actions a member can trigger."""

    CLOCK_IN = "clock-in"
    BREAK = "break"
    CLOCK_OUT = "clock-out"


class SessionState(Enum):
    """Where a (guild, user, department) key is in its session lifecycle."""

    IDLE = "idle"
    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"


def session_state(session: Session | None) -> SessionState:
    """Derive the lifecycle state from the active session, if any."""
    if session is None or not session.is_open:
        return SessionState.IDLE
    if session.on_break:
        return SessionState.ON_BREAK
    return SessionState.CLOCKED_IN


@dataclass
class ClockEvent:
    """A button press or command for one member in one department."""

    action: ClockAction
    guild_id: str
    user_id: str
    department_id: str
    timestamp: int
    department_name: str | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.guild_id, self.user_id, self.department_id)


@dataclass
class ClockResult:
    """Outcome of an accepted event."""

    action: ClockAction
    state: SessionState
    reply: str
    session: Session
    notification: Notification
    worked: int | None = None
    break_length: int | None = None


class ClockService:
    """Applies clock events to a session store.

    Events for the same key are serialized, so a double-clicked clock-in
    cannot open two sessions. The returned notification is for the caller
    to deliver once it has replied.
    """

    def __init__(self, store: SessionStore, lock_stripes: int = LOCK_STRIPES):
        self.store = store
        # Keys hash onto a fixed pool; unrelated keys may share a lock.
        self._locks = [threading.Lock() for _ in range(max(lock_stripes, 1))]

    def _lock_for(self, key: tuple[str, str, str]) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def state(self, guild_id: str, user_id: str, department_id: str) -> SessionState:
        return session_state(self.store.find_active(guild_id, user_id, department_id))

    def handle(self, event: ClockEvent) -> ClockResult:
        """Apply one event.

        Raises:
            AlreadyClockedInError: clock-in while a session is open.
            NotClockedInError: break or clock-out with no open session.
            SessionNotFoundError: the active session vanished mid-update.
        """
        with self._lock_for(event.key):
            if event.action is ClockAction.CLOCK_IN:
                result = self._clock_in(event)
            else:
                active = self.store.find_active(*event.key)
                if active is None:
                    raise NotClockedInError()
                if event.action is ClockAction.BREAK:
                    result = self._toggle_break(event, active)
                else:
                    result = self._clock_out(event, active)

        logger.info(
            "%s: user=%s department=%s guild=%s -> %s",
            event.action.value,
            event.user_id,
            event.department_id,
            event.guild_id,
            result.state.value,
        )
        return result

    def _clock_in(self, event: ClockEvent) -> ClockResult:
        session = self.store.create(*event.key, event.timestamp)
        name = event.department_name or DEFAULT_DEPARTMENT_NAME
        return ClockResult(
            action=event.action,
            state=SessionState.CLOCKED_IN,
            reply=f"Clocked in for **{name}**.",
            session=session,
            notification=Notification(
                title="Clock In",
                description=(
                    f"<@{event.user_id}> clocked in to **{name}**.\n"
                    f"Start: {chat_timestamp(event.timestamp)}"
                ),
                color=COLOR_CLOCK_IN,
                actor_id=event.user_id,
                timestamps={"clock_in": event.timestamp},
            ),
        )

    def _toggle_break(self, event: ClockEvent, active: Session) -> ClockResult:
        name = event.department_name or DEFAULT_DEPARTMENT_NAME

        if not active.on_break:
            session = self.store.start_break(active.id, event.timestamp)
            if session is None:
                raise SessionNotFoundError(f"Session {active.id} is no longer open")
            return ClockResult(
                action=event.action,
                state=SessionState.ON_BREAK,
                reply="You are now **on break**.",
                session=session,
                notification=Notification(
                    title="Break Started",
                    description=(
                        f"<@{event.user_id}> started break in **{name}** at "
                        f"{chat_timestamp(event.timestamp)}"
                    ),
                    color=COLOR_BREAK,
                    actor_id=event.user_id,
                    timestamps={"break_start": event.timestamp},
                ),
            )

        length = self.store.end_break(active.id, event.timestamp)
        if length is None:
            raise SessionNotFoundError(f"Session {active.id} is no longer on break")
        session = self.store.get(active.id) or active
        return ClockResult(
            action=event.action,
            state=SessionState.CLOCKED_IN,
            reply=f"Break ended: **{format_duration(length)}**",
            session=session,
            break_length=length,
            notification=Notification(
                title="Break Ended",
                description=(
                    f"<@{event.user_id}> ended break in **{name}**.\n"
                    f"Break duration: {format_duration(length)}"
                ),
                color=COLOR_BREAK,
                actor_id=event.user_id,
                timestamps={
                    "break_start": active.break_start,
                    "break_end": event.timestamp,
                },
            ),
        )

    def _clock_out(self, event: ClockEvent, active: Session) -> ClockResult:
        closed = self.store.close(active.id, event.timestamp)
        if closed is None:
            # Never report success or invent a duration for a lost session.
            raise SessionNotFoundError(f"Session {active.id} could not be closed")

        # Closed record as computed in memory, independent of whether the
        # store managed to persist it.
        session = replace(active)
        session.close(event.timestamp)
        others = [s for s in self.store.list_sessions() if s.id != active.id]
        total = aggregate.user_total_all_time(
            [*others, session], event.guild_id, event.user_id
        )
        worked = format_duration(closed.worked)
        breaks = format_duration(closed.break_total)
        hours = format_hours(total)
        name = event.department_name or DEFAULT_DEPARTMENT_NAME

        return ClockResult(
            action=event.action,
            state=SessionState.IDLE,
            reply=(
                f"Clocked out of **{name}**.\n"
                f"Worked: **{worked}**\nBreaks: **{breaks}**\nTotal: **{hours} hours**"
            ),
            session=session,
            worked=closed.worked,
            break_length=closed.break_total,
            notification=Notification(
                title="Clock Out",
                description=(
                    f"<@{event.user_id}> clocked out of **{name}**.\n"
                    f"Dur: **{worked}**\nBreaks: **{breaks}**\nTotal: **{hours} hours**"
                ),
                color=COLOR_CLOCK_OUT,
                actor_id=event.user_id,
                timestamps={
                    "clock_in": active.clock_in,
                    "clock_out": event.timestamp,
                },
            ),
        )
