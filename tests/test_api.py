import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neo.application import configure_planning_service, get_planning_service, reset_planning_state
from neo.application.planning import PlanningService
from neo.core.scheduler import VirtualClock
from neo.infrastructure import InMemoryRecordStore
from neo.settings import Settings


@pytest.fixture(autouse=True)
def reset_state():
    reset_planning_state()
    yield
    reset_planning_state()


@pytest.fixture()
def client():
    configure_planning_service(
        PlanningService(Settings(completion_delay=1.5), store=InMemoryRecordStore(), clock=VirtualClock())
    )
    from neo.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def test_root_landing_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/api/documents"


def test_documents_and_counts(client):
    response = client.get("/api/documents")
    assert response.status_code == 200
    slots = [item["slot"] for item in response.json()["items"]]
    assert slots == ["Canvas", "Strategy", "Financial Projection", "OKRs"]

    response = client.get("/api/documents/inconsistencies")
    assert response.json()["items"] == {"Canvas": 1, "Strategy": 1, "Financial Projection": 1, "OKRs": 1}

    response = client.get("/api/documents/okrs")
    assert response.status_code == 200
    assert response.json()["slot"] == "OKRs"

    assert client.get("/api/documents/roadmap").status_code == 404


def test_sync_findings(client):
    response = client.get("/api/documents/sync")
    assert response.status_code == 200
    items = response.json()["items"]
    assert items["Strategy"][0]["id"] == "sync-strategy-okr"
    assert items["Financial Projection"] == []


def test_apply_suggestion_flow(client):
    response = client.get("/api/suggestions", params={"slot": "Strategy"})
    assert response.status_code == 200
    body = response.json()
    assert [item["id"] for item in body["suggestions"]] == ["strategy-1", "strategy-2"]
    assert body["inconsistencies"][0]["section"] == "OKRs"

    response = client.post("/api/suggestions/strategy-1/apply")
    assert response.status_code == 200
    operation = response.json()["operation"]
    assert operation["status"] == "pending"

    response = client.get(f"/api/operations/{operation['operation_id']}")
    assert response.json()["status"] == "completed"
    assert response.json()["result"]["inconsistency_delta"] == -1

    strategy = client.get("/api/documents/Strategy").json()
    assert "Key Strategic Priorities" in strategy["html"]
    assert strategy["inconsistency_count"] == 0

    response = client.post("/api/suggestions/strategy-1/apply")
    assert response.json()["status"] == "already_implemented"

    suggestions = client.get("/api/suggestions", params={"slot": "Strategy"}).json()["suggestions"]
    assert suggestions[0]["implemented"] is True


def test_unknown_ids_are_not_found(client):
    assert client.post("/api/suggestions/missing/apply").status_code == 404
    assert client.get("/api/operations/op-99999").status_code == 404


def test_wizard_over_chat(client):
    response = client.post("/api/wizard/start")
    assert response.json()["wizard"] == {"active": True, "step": 1, "answers": {}}

    for answer in ("Goals", "Challenges", "Opportunities"):
        response = client.post("/api/chat", json={"message": answer})
    assert response.json()["wizard"]["step"] == 4

    response = client.post("/api/chat", json={"message": "Unique coaching"})
    body = response.json()
    assert body["wizard"]["active"] is False
    assert body["operation"]["label"] == "wizard-completion"

    operation = client.get(f"/api/operations/{body['operation']['operation_id']}").json()
    assert operation["status"] == "completed"
    counts = client.get("/api/documents/inconsistencies").json()["items"]
    assert counts == {"Canvas": 1, "Strategy": 1, "Financial Projection": 1, "OKRs": 2}

    transcript = client.get("/api/chat").json()["items"]
    assert transcript[-1]["response"].startswith("I've created your strategy documents!")


def test_wizard_cancel_and_plain_chat(client):
    client.post("/api/wizard/start")
    response = client.post("/api/wizard/cancel")
    assert response.json()["wizard"]["active"] is False

    response = client.post("/api/chat", json={"message": "Thoughts?"})
    assert "regarding strategy" in response.json()["response"]
    assert client.post("/api/chat", json={"message": " "}).status_code == 400


def test_file_import_and_listing(client):
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Plan"
    sheet.append(["month", "mrr"])
    sheet.append(["Jan", 1200])
    buffer = io.BytesIO()
    workbook.save(buffer)

    client.put("/api/settings/storage", json={"directory": "/exports"})
    response = client.post(
        "/api/files/import",
        files={"file": ("plan.xlsx", buffer.getvalue(), "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
        data={"doc_type": "Financial Projection"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["path"] == "/exports/financial projection_plan.xlsx"
    assert body["record"]["sheetName"] == "Plan"
    assert body["record"]["data"] == [{"month": "Jan", "mrr": 1200}]

    listing = client.get("/api/files").json()
    assert listing["items"] == ["/exports/financial projection_plan.xlsx"]
    assert listing["storage_directory"] == "/exports"


def test_malformed_upload_is_unprocessable(client):
    response = client.post("/api/files/import", files={"file": ("broken.json", b"{", "application/json")})
    assert response.status_code == 422
    assert client.get("/api/files").json()["items"] == []


def test_session_and_projects(client):
    assert client.get("/api/projects").status_code == 401
    response = client.post("/api/session/login", json={"email": "demo@example.com", "password": "nope"})
    assert response.status_code == 401

    response = client.post("/api/session/login", json={"email": "demo@example.com", "password": "password123"})
    assert response.status_code == 200
    assert response.json()["user"]["uid"] == "demo-user-1"

    projects = client.get("/api/projects").json()
    assert [item["id"] for item in projects["items"]] == ["project-1", "project-2"]
    assert projects["current"] == "default-project"

    response = client.post("/api/projects/project-1/select")
    assert response.json() == {"project_id": "project-1", "documents_loaded": False}
    assert client.post("/api/projects/unknown/select").status_code == 404

    client.post("/api/session/logout")
    assert get_planning_service().current_user() is None
