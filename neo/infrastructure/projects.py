"""Project registry persisted through the record store."""
from __future__ import annotations

import itertools
from typing import Any

from neo.core.errors import InvalidCredentials
from neo.core.schema import ProjectRecord, SessionUser, StoredDocument, UserRecord, utc_now
from neo.domain import DocumentSlot
from neo.infrastructure.record_store import RecordStore


USERS_KEY = "neoUsers"
PROJECTS_KEY = "neoProjects"
DOCUMENTS_KEY = "neoDocuments"

DEMO_USER_ID = "demo-user-1"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"
DEMO_PROJECTS = {
    "project-1": "NEO Strategy Demo",
    "project-2": "Product Launch Strategy",
}


def _empty_documents() -> dict[str, dict[str, Any]]:
    return {
        slot.storage_key: StoredDocument(type=slot.storage_key).model_dump(by_alias=True, exclude_none=True)
        for slot in DocumentSlot
    }


class ProjectRegistry:
    """Users, projects and their persisted documents.

    The credential check is a fixed demo password against the seeded user
    table; it is not a security boundary.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._project_counter = itertools.count(1)
        self.seed()

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _users(self) -> dict[str, dict[str, Any]]:
        return self._store.get(USERS_KEY) or {}

    def _projects(self) -> dict[str, dict[str, Any]]:
        return self._store.get(PROJECTS_KEY) or {}

    def _documents(self) -> dict[str, dict[str, dict[str, Any]]]:
        return self._store.get(DOCUMENTS_KEY) or {}

    def seed(self) -> None:
        """Create the demo user and projects when the store holds no users."""

        if self._users():
            return
        created = utc_now().isoformat()
        users = {DEMO_USER_ID: UserRecord(uid=DEMO_USER_ID, email=DEMO_EMAIL, projects=list(DEMO_PROJECTS)).model_dump()}
        projects = {
            project_id: ProjectRecord(id=project_id, name=name, owner_id=DEMO_USER_ID, created=created).model_dump(
                by_alias=True, exclude_none=True
            )
            for project_id, name in DEMO_PROJECTS.items()
        }
        documents = {project_id: _empty_documents() for project_id in DEMO_PROJECTS}
        self._store.set(USERS_KEY, users)
        self._store.set(PROJECTS_KEY, projects)
        self._store.set(DOCUMENTS_KEY, documents)

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> SessionUser:
        for uid, payload in self._users().items():
            if payload.get("email") == email and password == DEMO_PASSWORD:
                return SessionUser(uid=uid, email=email)
        raise InvalidCredentials("Invalid credentials")

    def list_projects(self, user_id: str) -> list[ProjectRecord]:
        user = self._users().get(user_id)
        if not user:
            return []
        projects = self._projects()
        return [ProjectRecord(**projects[project_id]) for project_id in user.get("projects", []) if project_id in projects]

    def get_documents(self, project_id: str) -> dict[str, StoredDocument]:
        stored = self._documents().get(project_id, {})
        return {doc_type: StoredDocument(**payload) for doc_type, payload in stored.items()}

    def save_document(self, project_id: str, doc_type: str, content: dict[str, Any]) -> StoredDocument:
        documents = self._documents()
        project_documents = documents.setdefault(project_id, {})
        existing = project_documents.get(doc_type) or {"type": doc_type}
        updated = StoredDocument(**existing).model_copy(
            update={"type": doc_type, "content": content, "last_modified": utc_now().isoformat()}
        )
        project_documents[doc_type] = updated.model_dump(by_alias=True, exclude_none=True)
        self._store.set(DOCUMENTS_KEY, documents)
        return updated

    def record_implemented_suggestion(self, project_id: str, doc_type: str, suggestion_id: str) -> bool:
        documents = self._documents()
        document = documents.get(project_id, {}).get(doc_type)
        if document is None:
            return False
        document.setdefault("implementedSuggestions", []).append(
            {"id": suggestion_id, "implementedAt": utc_now().isoformat()}
        )
        self._store.set(DOCUMENTS_KEY, documents)
        return True

    def create_project(self, user_id: str, name: str) -> ProjectRecord:
        users = self._users()
        if user_id not in users:
            raise KeyError(f"user {user_id!r} not found")
        project_id = f"project-{int(utc_now().timestamp())}-{next(self._project_counter)}"
        project = ProjectRecord(id=project_id, name=name, owner_id=user_id, created=utc_now().isoformat())

        projects = self._projects()
        projects[project_id] = project.model_dump(by_alias=True, exclude_none=True)
        users[user_id].setdefault("projects", []).append(project_id)
        documents = self._documents()
        documents[project_id] = _empty_documents()

        self._store.set(PROJECTS_KEY, projects)
        self._store.set(USERS_KEY, users)
        self._store.set(DOCUMENTS_KEY, documents)
        return project
