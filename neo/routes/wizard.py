from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, HTTPException

from neo.application import get_planning_service
from neo.application.wizard import WizardReply
from neo.domain import WizardState
from neo.routes.suggestions import operation_payload

router = APIRouter(tags=["wizard"])


def wizard_state_payload(state: WizardState) -> dict:
    return {
        "active": state.active,
        "step": state.step,
        "answers": {str(step): answer for step, answer in state.answers.items()},
    }


def _reply_payload(reply: WizardReply) -> dict:
    return {
        "response": reply.prompt,
        "wizard": wizard_state_payload(reply.state),
        "operation": operation_payload(reply.completion) if reply.completion else None,
    }


@router.post("/wizard/start")
async def start_wizard() -> dict:
    service = get_planning_service()
    return _reply_payload(service.start_wizard())


@router.post("/wizard/cancel")
async def cancel_wizard() -> dict:
    service = get_planning_service()
    service.cancel_wizard()
    return {"wizard": wizard_state_payload(service.wizard.state)}


@router.get("/wizard")
async def get_wizard() -> dict:
    service = get_planning_service()
    return {"wizard": wizard_state_payload(service.wizard.state)}


@router.post("/chat")
async def submit_chat(payload: dict, background_tasks: BackgroundTasks) -> dict:
    text = str(payload.get("message") or "")
    if not text.strip():
        raise HTTPException(status_code=400, detail="message is required")
    service = get_planning_service()
    reply = service.submit_chat(text)
    if isinstance(reply, WizardReply):
        if reply.completion is not None:
            background_tasks.add_task(service.queue.drain)
        return _reply_payload(reply)
    return {"response": reply, "wizard": wizard_state_payload(service.wizard.state), "operation": None}


@router.get("/chat")
async def get_transcript() -> dict:
    service = get_planning_service()
    return {"items": [{"id": entry.entry_id, "response": entry.response} for entry in service.transcript()]}
