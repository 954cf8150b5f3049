from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from neo.application import get_planning_service
from neo.core.errors import ParseError
from neo.extractors.normalize import UploadedFile

router = APIRouter(tags=["files"])


@router.post("/files/import")
async def import_file(file: UploadFile = File(...), doc_type: str | None = Form(default=None)) -> dict:
    """Normalize an uploaded document and store it in the virtual file system."""
    try:
        if not file.filename:
            raise HTTPException(status_code=400, detail="Uploaded file must have a filename")
        safe_name = Path(file.filename).name
        data = await file.read()
    finally:
        await file.close()

    service = get_planning_service()
    try:
        result = service.import_file(UploadedFile(file_name=safe_name, data=data), doc_type)
    except ParseError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {
        "path": result.virtual_path,
        "slot": result.slot.value,
        "record": result.record.to_storage(),
    }


@router.get("/files")
async def list_files() -> dict:
    service = get_planning_service()
    return {"items": service.list_files(), "storage_directory": service.storage_directory}


@router.get("/files/content")
async def read_file(path: str) -> dict:
    service = get_planning_service()
    entry = service.files.read(path)
    if entry is None:
        raise HTTPException(status_code=404, detail="file not found")
    return {"path": path, **entry}


@router.put("/settings/storage")
async def update_storage_directory(payload: dict) -> dict:
    directory = payload.get("directory")
    if not isinstance(directory, str):
        raise HTTPException(status_code=400, detail="directory is required")
    service = get_planning_service()
    return {"storage_directory": service.update_storage_directory(directory)}
