from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_repository, require
from app.core.config import settings
from app.core.security import Principal
from app.repositories.checklist_repository import ChecklistRepository
from app.schemas.check_run import AdminRunItem, RunResponse, RunReview
from app.services.authorization import Action
from app.services.check_run_service import CheckRunService

router = APIRouter()


@router.get("", response_model=List[AdminRunItem])
def list_runs(
    status_filter: Optional[str] = Query(None, alias="status"),
    section_id: Optional[int] = None,
    employee_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(require(Action.LIST_RUNS)),
) -> List[AdminRunItem]:
    """All runs matching the filters, newest first, capped."""
    return CheckRunService.list_runs(
        repo,
        principal,
        limit=settings.ADMIN_RUNS_LIMIT,
        status=status_filter,
        section_id=section_id,
        employee_id=employee_id,
        date_from=date_from,
        date_to=date_to,
    )


@router.post("/{run_id}/review", response_model=RunResponse)
def review_run(
    run_id: int,
    payload: Optional[RunReview] = None,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(require(Action.REVIEW_RUN)),
):
    run = CheckRunService.review_run(
        repo, principal, run_id, payload.review_note if payload else None,
    )
    return {"run": run}


@router.delete("/{run_id}")
def delete_run(
    run_id: int,
    repo: ChecklistRepository = Depends(get_repository),
    principal: Principal = Depends(require(Action.DELETE_RUN)),
) -> dict:
    """Delete a run and all of its entries atomically."""
    removed = CheckRunService.delete_run(repo, principal, run_id)
    return {"ok": True, "run_id": run_id, "entries_deleted": removed}
