"""Application service wiring documents, suggestions, wizard and ingestion."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from neo.application.suggestions import ApplyOutcome, SuggestionEngine, implementation_prompt
from neo.application.wizard import GuidedWizard, WizardReply
from neo.core.catalog import CATALOG, ActionCatalog
from neo.core.content import import_placeholder
from neo.core.scheduler import Clock, DeferredOperation, DeferredQueue
from neo.core.schema import IngestionRecord, ProjectRecord, SessionUser, utc_now
from neo.core.state import DocumentStateStore, Transcript, TranscriptEntry
from neo.core.sync import SyncFinding, check_synchronization
from neo.domain import ActionItem, DocumentContent, DocumentSlot, DocumentState
from neo.extractors.normalize import UploadedFile, normalize
from neo.infrastructure import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    ProjectRegistry,
    RecordStore,
    SessionService,
    VirtualFileSystem,
    build_virtual_path,
)
from neo.settings import Settings, load_settings


logger = logging.getLogger(__name__)

DEFAULT_PROJECT_ID = "default-project"
STORAGE_DIRECTORY_KEY = "neoStorageDirectory"

GREETING = (
    "I've analyzed your strategy document and financial projections. There are several areas where the "
    "OKRs could be better aligned with your financial goals. Would you like me to suggest specific improvements?"
)
CHAT_REPLY = (
    "I'm analyzing your input regarding {document}. Based on systems thinking principles, I can see potential "
    "reinforcing loops between your strategy and financial projections that need attention. Would you like me "
    "to elaborate on specific adjustments?"
)

DECLARED_TYPES: dict[str, DocumentSlot] = {
    "Strategy Document": DocumentSlot.STRATEGY,
    "Strategy": DocumentSlot.STRATEGY,
    "Canvas": DocumentSlot.CANVAS,
    "OKRs": DocumentSlot.OKRS,
    "Financial Projection": DocumentSlot.FINANCIAL_PROJECTION,
}


def resolve_slot(declared: str | None) -> DocumentSlot:
    """Map a caller supplied document type to a slot, defaulting to Strategy."""

    return DECLARED_TYPES.get((declared or "").strip(), DocumentSlot.STRATEGY)


@dataclass(frozen=True)
class ImportResult:
    virtual_path: str
    record: IngestionRecord
    slot: DocumentSlot


@dataclass(frozen=True)
class ApplyTicket:
    item: ActionItem
    operation: DeferredOperation
    prompt: str


@dataclass(frozen=True)
class CatalogEntry:
    item: ActionItem
    implemented: bool


class PlanningService:
    """Coordinates the public operations offered to the presentation layer."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: RecordStore | None = None,
        clock: Clock | None = None,
        catalog: ActionCatalog | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        if store is None:
            if self._settings.record_store_path is not None:
                store = JsonFileRecordStore(self._settings.record_store_path)
            else:
                store = InMemoryRecordStore()
        self._store = store
        self._catalog = catalog or CATALOG
        self._queue = DeferredQueue(clock)
        self._transcript = Transcript()
        self._documents = DocumentStateStore(counts=self._catalog.initial_counts())
        self._files = VirtualFileSystem(store)
        self._registry = ProjectRegistry(store)
        self._session = SessionService(self._registry, store)
        self._engine = SuggestionEngine(self._documents, self._transcript, persister=self._persist_document)
        self._wizard = GuidedWizard(self._documents, self._transcript, self._queue, self._settings.completion_delay)
        self._pending: dict[str, DeferredOperation] = {}
        self._project_id = DEFAULT_PROJECT_ID
        self._active_document = DocumentSlot.STRATEGY
        self._transcript.add(GREETING)

    # ------------------------------------------------------------------
    # collaborators exposed for the HTTP layer and tests
    # ------------------------------------------------------------------
    @property
    def queue(self) -> DeferredQueue:
        return self._queue

    @property
    def wizard(self) -> GuidedWizard:
        return self._wizard

    @property
    def files(self) -> VirtualFileSystem:
        return self._files

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def active_document(self) -> DocumentSlot:
        return self._active_document

    # ------------------------------------------------------------------
    # documents
    # ------------------------------------------------------------------
    def get_document_state(self, slot: DocumentSlot) -> DocumentState:
        return self._documents.get(slot)

    def list_inconsistency_counts(self) -> dict[DocumentSlot, int]:
        return self._documents.inconsistency_counts()

    def set_active_document(self, slot: DocumentSlot) -> None:
        self._active_document = slot

    def check_synchronization(self) -> dict[DocumentSlot, list[SyncFinding]]:
        contents = {slot: state.content for slot, state in self._documents.snapshot().items()}
        return check_synchronization(contents)

    def transcript(self) -> list[TranscriptEntry]:
        return list(self._transcript.entries)

    # ------------------------------------------------------------------
    # suggestions & inconsistencies
    # ------------------------------------------------------------------
    def _entries(self, items: list[ActionItem]) -> list[CatalogEntry]:
        return [CatalogEntry(item=item, implemented=self._documents.is_implemented(item.id)) for item in items]

    def list_suggestions(self, slot: DocumentSlot | None = None) -> list[CatalogEntry]:
        return self._entries(self._catalog.suggestions(slot))

    def list_inconsistencies(self, slot: DocumentSlot | None = None) -> list[CatalogEntry]:
        return self._entries(self._catalog.inconsistencies(slot))

    def implemented_items(self) -> list[str]:
        return self._documents.implemented()

    def apply_suggestion_or_inconsistency(self, item_id: str) -> ApplyTicket | None:
        """Schedule the application of an action item.

        Returns ``None`` when the item was already implemented and the pending
        ticket when an application is already in flight.  Unknown ids raise
        ``KeyError``.
        """

        item = self._catalog.get(item_id)
        if item is None:
            raise KeyError(item_id)
        if self._documents.is_implemented(item.id):
            return None
        pending = self._pending.get(item.id)
        if pending is not None and not pending.done:
            return ApplyTicket(item=item, operation=pending, prompt=implementation_prompt(item))

        operation = self._queue.schedule(
            self._settings.completion_delay,
            lambda: self._complete_application(item),
            label=f"apply:{item.id}",
        )
        self._pending[item.id] = operation
        return ApplyTicket(item=item, operation=operation, prompt=implementation_prompt(item))

    def _complete_application(self, item: ActionItem) -> ApplyOutcome | None:
        self._pending.pop(item.id, None)
        if self._documents.is_implemented(item.id):
            return None
        return self._engine.apply(item)

    def _persist_document(self, item: ActionItem, content: DocumentContent) -> None:
        user = self._session.current_user()
        if user is None or self._project_id == DEFAULT_PROJECT_ID:
            return
        slot = item.target_slot
        self._registry.save_document(self._project_id, slot.storage_key, {"html": content.html, "raw": content.raw})
        self._documents.mark_persisted(slot, utc_now())
        self._registry.record_implemented_suggestion(self._project_id, slot.storage_key, item.id)

    # ------------------------------------------------------------------
    # guided wizard & chat
    # ------------------------------------------------------------------
    def start_wizard(self) -> WizardReply:
        return self._wizard.start()

    def cancel_wizard(self) -> None:
        self._wizard.cancel()

    def submit_chat(self, text: str) -> WizardReply | str | None:
        """Route chat input to the wizard when it is active, otherwise reply directly."""

        if not text.strip():
            return None
        if self._wizard.active:
            return self._wizard.submit(text)
        reply = CHAT_REPLY.format(document=self._active_document.value.lower())
        self._transcript.add(reply)
        return reply

    # ------------------------------------------------------------------
    # ingestion
    # ------------------------------------------------------------------
    @property
    def storage_directory(self) -> str:
        stored = self._store.get(STORAGE_DIRECTORY_KEY)
        if isinstance(stored, str):
            return stored
        return self._settings.storage_directory

    def update_storage_directory(self, directory: str) -> str:
        directory = directory.strip()
        self._store.set(STORAGE_DIRECTORY_KEY, directory)
        return directory

    def import_file(self, upload: UploadedFile, declared_doc_type: str | None = None) -> ImportResult:
        slot = resolve_slot(declared_doc_type)
        document_type = slot.value.lower()
        record = normalize(upload, document_type)
        path = build_virtual_path(self.storage_directory, document_type, upload.file_name)
        path = self._files.persist(path, record)
        self._documents.patch(slot, import_placeholder(slot, record, path))
        self._active_document = slot
        logger.info("imported %s into %s at %s", upload.file_name, slot.value, path)
        return ImportResult(virtual_path=path, record=record, slot=slot)

    def list_files(self) -> list[str]:
        return self._files.list()

    # ------------------------------------------------------------------
    # session & projects
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> SessionUser:
        return self._session.login(email, password)

    def logout(self) -> None:
        self._session.logout()
        self._project_id = DEFAULT_PROJECT_ID

    def current_user(self) -> SessionUser | None:
        return self._session.current_user()

    def list_projects(self) -> list[ProjectRecord]:
        user = self._session.current_user()
        if user is None:
            return []
        return self._registry.list_projects(user.uid)

    def create_project(self, name: str) -> ProjectRecord | None:
        user = self._session.current_user()
        if user is None:
            return None
        return self._registry.create_project(user.uid, name)

    def select_project(self, project_id: str) -> bool:
        """Make ``project_id`` current and load its persisted documents."""

        user = self._session.current_user()
        if user is None:
            return False
        if project_id not in {project.id for project in self._registry.list_projects(user.uid)}:
            raise KeyError(project_id)
        self._project_id = project_id

        loaded = False
        counts = self._documents.inconsistency_counts()
        for doc_type, stored in self._registry.get_documents(project_id).items():
            slot = DocumentSlot.from_storage_key(doc_type)
            if slot is None:
                continue
            counts[slot] = len(stored.inconsistencies)
            html = stored.content.get("html")
            if isinstance(html, str) and html:
                raw = stored.content.get("raw")
                self._documents.patch(slot, DocumentContent(html=html, raw=raw if isinstance(raw, dict) else {}))
                loaded = True
        if loaded:
            for slot, count in counts.items():
                self._documents.set_inconsistency(slot, count)
        logger.info("selected project %s (documents loaded: %s)", project_id, loaded)
        return loaded


_service: PlanningService | None = None


def get_planning_service() -> PlanningService:
    """Return the singleton planning service for the process."""

    global _service
    if _service is None:
        _service = PlanningService(load_settings())
    return _service


def configure_planning_service(service: PlanningService) -> None:
    """Install a pre-built service (used by the app factory and tests)."""

    global _service
    _service = service


def reset_planning_state() -> None:
    """Drop the process-wide service so the next access starts fresh (used in tests)."""

    global _service
    _service = None
