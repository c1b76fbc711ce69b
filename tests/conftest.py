"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from shiftclock.store import MemorySessionStore

# Wednesday 2024-05-15 12:00 UTC
NOW = int(datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)


def utc_ms(*args) -> int:
    """Milliseconds for a UTC datetime given as ``datetime`` positional args."""
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture
def memory_store() -> MemorySessionStore:
    return MemorySessionStore()
