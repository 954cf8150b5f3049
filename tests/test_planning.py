import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neo.application.planning import PlanningService, resolve_slot
from neo.core.errors import ParseError
from neo.core.scheduler import VirtualClock
from neo.domain import DocumentSlot
from neo.extractors.normalize import UploadedFile
from neo.infrastructure import InMemoryRecordStore, JsonFileRecordStore
from neo.settings import Settings


@pytest.fixture()
def service():
    return PlanningService(Settings(completion_delay=1.5), store=InMemoryRecordStore(), clock=VirtualClock())


@pytest.mark.parametrize(
    ("declared", "expected"),
    [
        ("Strategy Document", DocumentSlot.STRATEGY),
        ("Canvas", DocumentSlot.CANVAS),
        ("OKRs", DocumentSlot.OKRS),
        ("Financial Projection", DocumentSlot.FINANCIAL_PROJECTION),
        ("Something else", DocumentSlot.STRATEGY),
        (None, DocumentSlot.STRATEGY),
    ],
)
def test_declared_document_type_selects_slot(declared, expected):
    assert resolve_slot(declared) is expected


def test_import_replaces_target_slot_with_placeholder(service):
    before = service.get_document_state(DocumentSlot.STRATEGY)
    result = service.import_file(UploadedFile("kpis.csv", b"name,value\nx,1"), "OKRs")

    assert result.slot is DocumentSlot.OKRS
    assert result.virtual_path == "okrs_kpis.csv"
    assert result.record.data == [{"name": "x", "value": 1}]
    assert service.list_files() == ["okrs_kpis.csv"]
    assert service.active_document is DocumentSlot.OKRS

    okrs = service.get_document_state(DocumentSlot.OKRS)
    assert "Imported from kpis.csv" in okrs.content.html
    assert okrs.content.raw["fileName"] == "kpis.csv"
    assert service.get_document_state(DocumentSlot.STRATEGY).content == before.content


def test_import_uses_storage_directory(service):
    assert service.update_storage_directory(" /exports ") == "/exports"
    result = service.import_file(UploadedFile("plan.json", b'{"a": 1}'), "Financial Projection")
    assert result.virtual_path == "/exports/financial projection_plan.json"
    assert service.storage_directory == "/exports"


def test_storage_directory_defaults_to_settings():
    service = PlanningService(Settings(storage_directory="/data"), store=InMemoryRecordStore(), clock=VirtualClock())
    assert service.storage_directory == "/data"


def test_failed_import_persists_nothing(service):
    before = service.get_document_state(DocumentSlot.STRATEGY)
    with pytest.raises(ParseError):
        service.import_file(UploadedFile("broken.json", b"{"), "Strategy")
    assert service.list_files() == []
    assert service.get_document_state(DocumentSlot.STRATEGY).content == before.content


def test_select_project_loads_saved_documents(service):
    service.login("demo@example.com", "password123")
    service.select_project("project-1")
    service.apply_suggestion_or_inconsistency("strategy-1")
    service.queue.advance(2)
    service.logout()

    fresh = PlanningService(Settings(), store=service.store, clock=VirtualClock())
    fresh.login("demo@example.com", "password123")
    assert fresh.select_project("project-1") is True
    assert fresh.project_id == "project-1"
    assert "Key Strategic Priorities" in fresh.get_document_state(DocumentSlot.STRATEGY).content.html
    assert fresh.list_inconsistency_counts() == {slot: 0 for slot in DocumentSlot}


def test_select_project_without_saved_content_keeps_defaults(service):
    service.login("demo@example.com", "password123")
    assert service.select_project("project-2") is False
    assert service.list_inconsistency_counts() == {slot: 1 for slot in DocumentSlot}


def test_select_project_requires_login_and_known_id(service):
    assert service.select_project("project-1") is False
    service.login("demo@example.com", "password123")
    with pytest.raises(KeyError):
        service.select_project("project-999")


def test_projects_are_listed_for_the_current_user(service):
    assert service.list_projects() == []
    service.login("demo@example.com", "password123")
    created = service.create_project("Expansion")
    assert created.id in [project.id for project in service.list_projects()]


def test_state_survives_in_a_json_file_store(tmp_path):
    settings = Settings(record_store_path=tmp_path / "store.json")
    service = PlanningService(settings, clock=VirtualClock())
    service.import_file(UploadedFile("notes.txt", b"hello"), "Canvas")

    reopened = PlanningService(settings, store=JsonFileRecordStore(tmp_path / "store.json"), clock=VirtualClock())
    assert reopened.list_files() == ["canvas_notes.txt"]
