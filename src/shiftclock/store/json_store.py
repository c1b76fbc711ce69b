"""JSON file-backed session store."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..models import Session, dump_document, load_document
from .base import DocumentSessionStore

logger = logging.getLogger(__name__)


class JsonSessionStore(DocumentSessionStore):
    """Session store using a single ``{"sessions": [...]}`` JSON document."""

    def __init__(self, path: str | Path):
        """Initialize the store.

        Args:
            path: Location of the JSON document. It is created on first write.
        """
        super().__init__()
        self.path = Path(path)

    def _read_json(self) -> dict[str, Any]:
        """Read and parse the data file."""
        if not self.path.exists():
            return {"sessions": []}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def _write_json(self, data: dict[str, Any]) -> None:
        """Write data to the data file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def _load(self) -> list[Session]:
        try:
            return load_document(self._read_json())
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(
                "Could not load sessions from %s, starting empty: %s", self.path, e
            )
            return []

    def _save(self, sessions: list[Session]) -> None:
        try:
            self._write_json(dump_document(sessions))
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write sessions to %s", self.path)
