from __future__ import annotations

from typing import Any

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query

from neo.application import get_planning_service
from neo.application.planning import CatalogEntry
from neo.application.suggestions import ApplyOutcome
from neo.core.scheduler import DeferredOperation
from neo.routes.documents import resolve_slot_or_404

router = APIRouter(tags=["suggestions"])


def entry_payload(entry: CatalogEntry) -> dict:
    item = entry.item
    return {
        "id": item.id,
        "text": item.text,
        "section": item.target_slot.value,
        "action": item.action.value,
        "kind": item.kind.value,
        "listed_under": item.listed_under.value,
        "implemented": entry.implemented,
    }


def _result_payload(result: Any) -> Any:
    if isinstance(result, ApplyOutcome):
        return {
            "item_id": result.item_id,
            "confirmation": result.confirmation_text,
            "inconsistency_delta": result.inconsistency_delta,
            "mutated": result.mutated,
        }
    return result


def operation_payload(operation: DeferredOperation) -> dict:
    return {
        "operation_id": operation.operation_id,
        "label": operation.label,
        "status": operation.status,
        "result": _result_payload(operation.result),
    }


@router.get("/suggestions")
async def list_suggestions(slot: str | None = Query(default=None)) -> dict:
    service = get_planning_service()
    resolved = resolve_slot_or_404(slot) if slot else None
    return {
        "suggestions": [entry_payload(entry) for entry in service.list_suggestions(resolved)],
        "inconsistencies": [entry_payload(entry) for entry in service.list_inconsistencies(resolved)],
        "implemented": service.implemented_items(),
    }


@router.post("/suggestions/{item_id}/apply")
async def apply_suggestion(item_id: str, background_tasks: BackgroundTasks) -> dict:
    """Schedule an action item; the document changes once the operation completes."""
    service = get_planning_service()
    try:
        ticket = service.apply_suggestion_or_inconsistency(item_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"unknown action item {item_id}")
    if ticket is None:
        return {"item_id": item_id, "status": "already_implemented", "operation": None}

    background_tasks.add_task(service.queue.drain)
    return {
        "item_id": item_id,
        "status": ticket.operation.status,
        "prompt": ticket.prompt,
        "operation": operation_payload(ticket.operation),
    }


@router.get("/operations/{operation_id}")
async def get_operation(operation_id: str) -> dict:
    service = get_planning_service()
    operation = service.queue.get(operation_id)
    if operation is None:
        raise HTTPException(status_code=404, detail="operation not found")
    return operation_payload(operation)
