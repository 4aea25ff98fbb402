# app/api/routes/check_runs.py
"""
Employee-facing check-run endpoints (mounted under /api/v1/check-runs):

  POST /                      – create or reuse today's open run
  GET  /status?section_id=    – latest own run for a section
  GET  /me?status=            – own runs with progress counts
  GET  /{run_id}              – run + ordered entries (owner or staff)
  POST /{run_id}/entries      – upsert one item result (multipart, optional photo)
  POST /{run_id}/submit       – in_progress -> submitted
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from app.api.deps import get_current_principal, get_photo_store, get_repository
from app.core.config import settings
from app.core.errors import InvalidInput
from app.core.security import Principal
from app.repositories.checklist_repository import ChecklistRepository
from app.schemas.check_run import (
    EntryResponse, MyRunItem, RunCreate, RunCreateResponse, RunDetailResponse,
    RunResponse, RunStatusResponse,
)
from app.services.check_run_service import CheckRunService
from app.services.photo_store import (
    ExistingPhotoUrl, NewPhoto, NoPhoto, PhotoInput, PhotoStore,
)

router = APIRouter()


@router.post("", response_model=RunCreateResponse, status_code=status.HTTP_201_CREATED)
def create_run(
    payload: RunCreate,
    response: Response,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_principal),
):
    """
    Start a run for a section, or return the caller's run still open today
    (``reused=true``, HTTP 200).
    """
    run, reused = CheckRunService.create_run(repo, principal, payload.section_id)
    if reused:
        response.status_code = status.HTTP_200_OK
    return {"run": run, "reused": reused}


@router.get("/status", response_model=RunStatusResponse)
def get_run_status(
    section_id: int = Query(...),
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_principal),
):
    run = CheckRunService.get_run_status(repo, principal, section_id)
    return {"run": run}


@router.get("/me", response_model=List[MyRunItem])
def list_my_runs(
    status_filter: Optional[str] = Query(None, alias="status"),
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_principal),
):
    return CheckRunService.list_my_runs(
        repo, principal, status=status_filter, limit=settings.MY_RUNS_LIMIT,
    )


@router.get("/{run_id}", response_model=RunDetailResponse)
def get_run(
    run_id: int,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_principal),
):
    return CheckRunService.get_run(repo, principal, run_id)


async def _photo_input(photo: Optional[UploadFile], photo_url: Optional[str]) -> PhotoInput:
    has_upload = photo is not None and bool(photo.filename)
    has_url = bool(photo_url and photo_url.strip())
    if has_upload and has_url:
        raise InvalidInput("Send either a photo upload or a photo_url, not both")
    if has_upload:
        content = await photo.read()
        return NewPhoto(
            content=content,
            content_type=photo.content_type or "",
            filename=photo.filename or "photo",
        )
    if has_url:
        return ExistingPhotoUrl(url=photo_url.strip())
    return NoPhoto()


@router.post("/{run_id}/entries", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
async def upsert_entry(
    run_id: int,
    item_id: str = Form(...),
    result: str = Form(...),
    note: Optional[str] = Form(None),
    photo_url: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    repo: ChecklistRepository = Depends(get_repository),
    photos: PhotoStore = Depends(get_photo_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Record an item result. A ``photo`` file or a ``photo_url`` may be sent;
    omitting both keeps the photo already on record for this item.
    """
    photo_input = await _photo_input(photo, photo_url)
    entry = CheckRunService.upsert_entry(
        repo,
        photos,
        principal,
        run_id=run_id,
        item_id=item_id,
        result=result,
        note=note,
        photo=photo_input,
    )
    return {"entry": entry}


@router.post("/{run_id}/submit", response_model=RunResponse)
def submit_run(
    run_id: int,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(get_current_principal),
):
    run = CheckRunService.submit_run(repo, principal, run_id)
    return {"run": run}
