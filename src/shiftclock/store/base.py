"""Session store interface and the shared read-modify-write implementation."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from ..errors import AlreadyClockedInError
from ..models import CloseResult, Session

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Authoritative collection of work sessions.

    Implementations guarantee at most one open session per
    (guild, user, department) key.
    """

    def list_sessions(self) -> list[Session]:
        raise NotImplementedError

    def get(self, session_id: str) -> Session | None:
        raise NotImplementedError

    def find_active(
        self, guild_id: str, user_id: str, department_id: str
    ) -> Session | None:
        raise NotImplementedError

    def create(
        self, guild_id: str, user_id: str, department_id: str, clock_in: int
    ) -> Session:
        raise NotImplementedError

    def start_break(self, session_id: str, now: int) -> Session | None:
        raise NotImplementedError

    def end_break(self, session_id: str, now: int) -> int | None:
        raise NotImplementedError

    def close(self, session_id: str, clock_out: int) -> CloseResult | None:
        raise NotImplementedError


def _find_active(
    sessions: list[Session], guild_id: str, user_id: str, department_id: str
) -> Session | None:
    for session in sessions:
        if session.is_open and session.key == (guild_id, user_id, department_id):
            return session
    return None


def _find_open(sessions: list[Session], session_id: str) -> Session | None:
    for session in sessions:
        if session.id == session_id:
            return session if session.is_open else None
    return None


class DocumentSessionStore:
    """Store that rewrites its whole collection on every mutation.

    Subclasses provide ``_load`` and ``_save``. Each mutation runs
    load-mutate-save under one lock, so concurrent callers in this process
    never observe or write a partial collection.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def _load(self) -> list[Session]:
        raise NotImplementedError

    def _save(self, sessions: list[Session]) -> None:
        raise NotImplementedError

    def list_sessions(self) -> list[Session]:
        """Return a snapshot of every session, open and closed."""
        with self._lock:
            return self._load()

    def get(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        for session in self.list_sessions():
            if session.id == session_id:
                return session
        return None

    def find_active(
        self, guild_id: str, user_id: str, department_id: str
    ) -> Session | None:
        """Return the open session for the key, if there is one."""
        return _find_active(self.list_sessions(), guild_id, user_id, department_id)

    def create(
        self, guild_id: str, user_id: str, department_id: str, clock_in: int
    ) -> Session:
        """Open a new session.

        Raises:
            AlreadyClockedInError: the key already has an open session.
        """
        with self._lock:
            sessions = self._load()
            if _find_active(sessions, guild_id, user_id, department_id):
                raise AlreadyClockedInError()

            session = Session.create(guild_id, user_id, department_id, clock_in)
            sessions.append(session)
            self._save(sessions)

        logger.debug("Created session %s for %s", session.id, session.key)
        return session

    def start_break(self, session_id: str, now: int) -> Session | None:
        """Put an open session on break. Returns None for unknown or closed ids."""
        with self._lock:
            sessions = self._load()
            session = _find_open(sessions, session_id)
            if session is None:
                return None
            session.begin_break(now)
            self._save(sessions)
        return session

    def end_break(self, session_id: str, now: int) -> int | None:
        """End the break in progress and return its length in ms."""
        with self._lock:
            sessions = self._load()
            session = _find_open(sessions, session_id)
            if session is None or not session.on_break:
                return None
            length = session.finish_break(now)
            self._save(sessions)
        return length

    def close(self, session_id: str, clock_out: int) -> CloseResult | None:
        """Close an open session.

        A break still in progress is ended at ``clock_out`` before the worked
        duration is computed. Returns None if the id is unknown or the
        session is already closed.
        """
        with self._lock:
            sessions = self._load()
            session = _find_open(sessions, session_id)
            if session is None:
                return None
            result = session.close(clock_out)
            self._save(sessions)
        return result
