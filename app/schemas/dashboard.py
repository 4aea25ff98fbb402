from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class StatusTotals(BaseModel):
    in_progress: int
    submitted: int
    reviewed: int


class SectionSummary(StatusTotals):
    section_id: int
    section_name: str
    is_active: bool
    last_run_id: Optional[int]
    last_status: Optional[str]
    last_started_at: Optional[datetime]
    last_employee_name: Optional[str]
    last_employee_email: Optional[str]


class DashboardSummary(BaseModel):
    totals: StatusTotals
    sections: List[SectionSummary]
