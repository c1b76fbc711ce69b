"""Data models for shiftclock."""

from .session import Session, CloseResult, SCHEMA_VERSION, load_document, dump_document
from .config import ShiftclockConfig

__all__ = [
    "Session",
    "CloseResult",
    "SCHEMA_VERSION",
    "load_document",
    "dump_document",
    "ShiftclockConfig",
]
