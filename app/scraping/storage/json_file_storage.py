"""
Single-document JSON file state store.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from app.scraping.storage.base import StateStore

logger = logging.getLogger(__name__)


class JSONFileStateStore(StateStore):
    """
    Keep all state keys in one JSON document on disk.

    Writes go to a temp file in the same directory and are swapped in with
    `os.replace`, so readers never see a half-written document.
    """

    def __init__(self, *, path: str | Path) -> None:
        self._path = Path(path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set_many(self, values: dict[str, Any]) -> None:
        document = self._read()
        document.update(values)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("State file %s is not valid JSON; starting from empty state", self._path)
            return {}
        return document if isinstance(document, dict) else {}
