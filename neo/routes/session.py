from __future__ import annotations

from fastapi import APIRouter, HTTPException

from neo.application import get_planning_service
from neo.core.errors import InvalidCredentials

router = APIRouter(tags=["session"])


@router.post("/session/login")
async def login(payload: dict) -> dict:
    email = str(payload.get("email") or "")
    password = str(payload.get("password") or "")
    service = get_planning_service()
    try:
        user = service.login(email, password)
    except InvalidCredentials:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"user": user.model_dump()}


@router.post("/session/logout")
async def logout() -> dict:
    service = get_planning_service()
    service.logout()
    return {"user": None}


@router.get("/session")
async def current_session() -> dict:
    service = get_planning_service()
    user = service.current_user()
    return {"user": user.model_dump() if user else None, "project_id": service.project_id}


@router.get("/projects")
async def list_projects() -> dict:
    service = get_planning_service()
    if service.current_user() is None:
        raise HTTPException(status_code=401, detail="login required")
    items = [project.model_dump(by_alias=True, exclude_none=True) for project in service.list_projects()]
    return {"items": items, "current": service.project_id}


@router.post("/projects")
async def create_project(payload: dict) -> dict:
    name = str(payload.get("name") or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    service = get_planning_service()
    project = service.create_project(name)
    if project is None:
        raise HTTPException(status_code=401, detail="login required")
    return project.model_dump(by_alias=True, exclude_none=True)


@router.post("/projects/{project_id}/select")
async def select_project(project_id: str) -> dict:
    service = get_planning_service()
    if service.current_user() is None:
        raise HTTPException(status_code=401, detail="login required")
    try:
        loaded = service.select_project(project_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="project not found")
    return {"project_id": project_id, "documents_loaded": loaded}
