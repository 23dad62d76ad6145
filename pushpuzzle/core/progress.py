from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

CURRENT_LEVEL_KEY = "current_level"


def completion_key(level_index: int) -> str:
    return f"completed.{level_index}"


class KeyValueStore(Protocol):
    """Integer settings the game needs to keep between runs."""

    def get(self, key: str, default: int = 0) -> int: ...

    def set(self, key: str, value: int) -> None: ...


class MemoryStore:
    """In-process store; nothing survives the process."""

    def __init__(self, values: Optional[Dict[str, int]] = None) -> None:
        self._values: Dict[str, int] = dict(values or {})

    def get(self, key: str, default: int = 0) -> int:
        return self._values.get(key, default)

    def set(self, key: str, value: int) -> None:
        self._values[key] = int(value)

    def reset(self) -> None:
        self._values = {}


def default_progress_path() -> Path:
    override = os.environ.get("PUSHPUZZLE_PROGRESS_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pushpuzzle" / "progress.json"


class ProgressStore:
    """Stores the current level index and per-level completion counts.

    Persisted as a flat JSON object (default ~/.pushpuzzle/progress.json).
    Every ``set`` is written through; I/O problems are logged, not raised.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_progress_path()
        self._values = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str, default: int = 0) -> int:
        return self._values.get(key, default)

    def set(self, key: str, value: int) -> None:
        self._values[key] = int(value)
        self._save()

    def reset(self) -> None:
        """Clear all progress."""
        self._values = {}
        self._save()

    def save(self) -> None:
        """Persist current state to disk (e.g. on app exit)."""
        self._save()

    def _load(self) -> Dict[str, int]:
        values: Dict[str, int] = {}
        if not self._file_path.exists():
            return values
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return values
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected an object", self._file_path)
            return values

        for key, value in payload.items():
            try:
                values[str(key)] = int(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-integer progress value %s=%r", key, value)
        return values

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
