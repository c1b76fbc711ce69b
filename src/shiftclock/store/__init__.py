"""Session store implementations."""

from .base import SessionStore, DocumentSessionStore
from .json_store import JsonSessionStore
from .memory_store import MemorySessionStore

__all__ = [
    "SessionStore",
    "DocumentSessionStore",
    "JsonSessionStore",
    "MemorySessionStore",
]
