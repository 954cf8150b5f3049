from __future__ import annotations

from fastapi import APIRouter, HTTPException

from neo.application import get_planning_service
from neo.domain import DocumentSlot, DocumentState

router = APIRouter(prefix="/documents", tags=["documents"])


def resolve_slot_or_404(value: str) -> DocumentSlot:
    try:
        return DocumentSlot(value)
    except ValueError:
        slot = DocumentSlot.from_storage_key(value)
    if slot is None:
        raise HTTPException(status_code=404, detail=f"unknown document {value}")
    return slot


def document_payload(state: DocumentState) -> dict:
    return {
        "slot": state.slot.value,
        "html": state.content.html,
        "raw": state.content.raw,
        "inconsistency_count": state.inconsistency_count,
        "last_modified": state.last_modified.isoformat() if state.last_modified else None,
    }


@router.get("")
async def list_documents() -> dict:
    service = get_planning_service()
    items = [document_payload(service.get_document_state(slot)) for slot in DocumentSlot]
    return {"items": items, "active": service.active_document.value}


@router.get("/inconsistencies")
async def list_inconsistency_counts() -> dict:
    service = get_planning_service()
    counts = service.list_inconsistency_counts()
    return {"items": {slot.value: count for slot, count in counts.items()}}


@router.get("/sync")
async def check_synchronization() -> dict:
    service = get_planning_service()
    findings = service.check_synchronization()
    return {
        "items": {
            slot.value: [
                {
                    "id": finding.id,
                    "text": finding.text,
                    "severity": finding.severity,
                    "section": finding.target_slot.value,
                    "action": finding.action,
                }
                for finding in slot_findings
            ]
            for slot, slot_findings in findings.items()
        }
    }


@router.get("/{slot}")
async def get_document(slot: str) -> dict:
    service = get_planning_service()
    resolved = resolve_slot_or_404(slot)
    service.set_active_document(resolved)
    return document_payload(service.get_document_state(resolved))
