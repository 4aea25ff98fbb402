# app/api/routes/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require
from app.core.security import Principal
from app.schemas.dashboard import DashboardSummary
from app.services.authorization import Action
from app.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def get_dashboard_summary(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.VIEW_DASHBOARD)),
):
    """
    Today's run counts

    Returns:
    - totals by status across all sections
    - per section: counts by status and the latest run of the day
    """
    return DashboardService.get_summary(db)
