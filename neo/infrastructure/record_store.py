"""Key-value record store implementations."""
from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from neo.core.errors import PersistenceFailure


logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Persistence contract: plain ``get``/``set`` with last write wins."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def reset(self) -> None: ...


class InMemoryRecordStore:
    """Simple in-memory store for fast iteration and tests."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        value = self._values.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def reset(self) -> None:
        self._values.clear()


class JsonFileRecordStore:
    """Persists every key into a single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fp:
                payload = json.load(fp)
        except json.JSONDecodeError:
            logger.warning("record store %s is not valid JSON, starting empty", self._path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        payload = self._load()
        payload[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as fp:
                json.dump(payload, fp, ensure_ascii=False, indent=2)
            tmp_path.replace(self._path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceFailure(f"could not write {key!r} to {self._path}: {exc}") from exc

    def reset(self) -> None:
        if self._path.exists():
            self._path.unlink()
