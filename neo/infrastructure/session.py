"""Mocked authentication session."""
from __future__ import annotations

from neo.core.schema import SessionUser
from neo.infrastructure.projects import ProjectRegistry
from neo.infrastructure.record_store import RecordStore


CURRENT_USER_KEY = "neoCurrentUser"


class SessionService:
    def __init__(self, registry: ProjectRegistry, store: RecordStore) -> None:
        self._registry = registry
        self._store = store

    def current_user(self) -> SessionUser | None:
        payload = self._store.get(CURRENT_USER_KEY)
        if not isinstance(payload, dict):
            return None
        return SessionUser(**payload)

    def login(self, email: str, password: str) -> SessionUser:
        user = self._registry.login(email, password)
        self._store.set(CURRENT_USER_KEY, user.model_dump())
        return user

    def logout(self) -> None:
        self._store.set(CURRENT_USER_KEY, None)
