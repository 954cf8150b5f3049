from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


SourceFormat = Literal["csv", "excel", "word", "json", "text", "unknown"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestionRecord(BaseModel):
    """Normalized envelope produced once per uploaded file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_type: str = Field(alias="type")
    format: SourceFormat
    file_name: str = Field(alias="fileName")
    data: Any = None
    meta: dict[str, Any] | None = None
    sheet_name: str | None = Field(default=None, alias="sheetName")
    content: str | None = None
    last_modified: datetime = Field(default_factory=utc_now, alias="lastModified")

    @property
    def payload(self) -> Any:
        """Format specific part of the record."""

        if self.format in {"csv", "excel", "json"}:
            return self.data
        return self.content

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserRecord(BaseModel):
    uid: str
    email: str
    projects: list[str] = Field(default_factory=list)


class SessionUser(BaseModel):
    uid: str
    email: str


class ProjectRecord(BaseModel):
    id: str
    name: str
    owner_id: str = Field(alias="ownerId")
    created: str
    last_modified: str | None = Field(default=None, alias="lastModified")

    model_config = ConfigDict(populate_by_name=True)


class StoredDocument(BaseModel):
    """Persisted copy of a document inside a project."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    content: dict[str, Any] = Field(default_factory=dict)
    inconsistencies: list[dict[str, Any]] = Field(default_factory=list)
    suggestions: list[dict[str, Any]] = Field(default_factory=list)
    implemented_suggestions: list[dict[str, Any]] = Field(default_factory=list, alias="implementedSuggestions")
    last_modified: str | None = Field(default=None, alias="lastModified")
