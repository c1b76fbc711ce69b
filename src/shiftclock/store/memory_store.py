"""In-memory session store."""

from typing import Any

from ..models import Session
from .base import DocumentSessionStore


class MemorySessionStore(DocumentSessionStore):
    """Session store kept in process memory.

    Records are held in their persisted form so callers always receive
    copies, the same as with the file-backed store.
    """

    def __init__(self, sessions: list[Session] | None = None):
        super().__init__()
        self._records: list[dict[str, Any]] = [s.to_dict() for s in sessions or []]

    def _load(self) -> list[Session]:
        return [Session.from_dict(r) for r in self._records]

    def _save(self, sessions: list[Session]) -> None:
        self._records = [s.to_dict() for s in sessions]
