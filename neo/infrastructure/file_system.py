"""Virtual file system addressing ingestion records by path."""
from __future__ import annotations

from typing import Any

from neo.core.schema import IngestionRecord, utc_now
from neo.infrastructure.record_store import RecordStore


FILE_SYSTEM_KEY = "neoFileSystem"


def build_virtual_path(storage_directory: str | None, document_type: str, file_name: str) -> str:
    prefix = f"{storage_directory.rstrip('/')}/" if storage_directory else ""
    return f"{prefix}{document_type.lower()}_{file_name}"


class VirtualFileSystem:
    """Thin facade storing ingestion records in the record store."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def _entries(self) -> dict[str, dict[str, Any]]:
        entries = self._store.get(FILE_SYSTEM_KEY)
        return entries if isinstance(entries, dict) else {}

    def persist(self, path: str, record: IngestionRecord) -> str:
        entries = self._entries()
        entries[path] = {"content": record.to_storage(), "lastModified": utc_now().isoformat()}
        self._store.set(FILE_SYSTEM_KEY, entries)
        return path

    def read(self, path: str) -> dict[str, Any] | None:
        return self._entries().get(path)

    def list(self) -> list[str]:
        return sorted(self._entries())

    def count(self) -> int:
        return len(self._entries())
