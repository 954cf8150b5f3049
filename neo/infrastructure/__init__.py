"""Infrastructure layer exports."""

from .file_system import VirtualFileSystem, build_virtual_path
from .projects import ProjectRegistry
from .record_store import InMemoryRecordStore, JsonFileRecordStore, RecordStore
from .session import SessionService

__all__ = [
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "ProjectRegistry",
    "RecordStore",
    "SessionService",
    "VirtualFileSystem",
    "build_virtual_path",
]
