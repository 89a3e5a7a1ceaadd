"""Persistence of the memo text between sessions.

``FileStorage`` keeps a small JSON document in the user's data directory,
keyed like browser local storage, and writes it atomically (temp file +
rename) so a crash mid-save never leaves a truncated memo behind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

import platformdirs

from memo_engine.config import STORAGE_KEY
from memo_engine.runtime import telemetry

APP_NAME = "memo-engine"
STORAGE_FILENAME = "storage.json"


class MemoryStorage:
    """Keeps the text in process memory; handy for tests and ``--in-memory``."""

    def __init__(self, initial: Optional[str] = None) -> None:
        self.value = initial
        self.saves = 0

    def load(self) -> Optional[str]:
        return self.value

    def save(self, text: str) -> bool:
        self.value = text
        self.saves += 1
        return True


class FileStorage:
    """JSON-file storage under the platform data directory."""

    def __init__(
        self,
        path: Optional[Path | str] = None,
        *,
        key: str = STORAGE_KEY,
    ) -> None:
        if path is None:
            path = Path(platformdirs.user_data_dir(APP_NAME)) / STORAGE_FILENAME
        self.path = Path(path)
        self.key = key

    def load(self) -> Optional[str]:
        value = self._read_all().get(self.key)
        return value if isinstance(value, str) else None

    def save(self, text: str) -> bool:
        entries = self._read_all()
        entries[self.key] = text
        return self._write_all(entries)

    def _read_all(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            telemetry.record_event(
                "storage.read_failed",
                level="warning",
                data={"path": str(self.path), "error": str(exc)},
            )
            return {}
        if not isinstance(data, dict):
            telemetry.record_event(
                "storage.invalid_format", level="warning", data={"path": str(self.path)}
            )
            return {}
        return data

    def _write_all(self, entries: Dict[str, object]) -> bool:
        temp_file = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False, indent=2)
            temp_file.replace(self.path)
            return True
        except OSError as exc:
            telemetry.record_event(
                "storage.write_failed",
                level="warning",
                data={"path": str(self.path), "error": str(exc)},
            )
            temp_file.unlink(missing_ok=True)
            return False


__all__ = ["MemoryStorage", "FileStorage", "APP_NAME", "STORAGE_FILENAME"]
