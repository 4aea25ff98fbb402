# app/services/dashboard_service.py
from datetime import datetime
from typing import Dict, List, Any, Optional
from sqlalchemy import func, case
from sqlalchemy.orm import Session
from app.models.check_run import CheckRun
from app.models.section import Section
from app.models.user import User
from app.services.utils.clock import business_day_bounds

STATUSES = ("in_progress", "submitted", "reviewed")


class DashboardService:
    @staticmethod
    def get_summary(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Today's run totals plus a per-section breakdown with the latest run"""
        day_start, day_end = business_day_bounds(now)
        today_filter = (CheckRun.started_at >= day_start, CheckRun.started_at < day_end)

        totals = DashboardService._get_totals(db, today_filter)
        sections = DashboardService._get_sections(db, today_filter)

        return {
            "totals": totals,
            "sections": sections,
        }

    @staticmethod
    def _status_counts():
        return [
            func.count(case((CheckRun.status == status, 1))).label(status)
            for status in STATUSES
        ]

    @staticmethod
    def _get_totals(db: Session, today_filter) -> Dict[str, int]:
        row = db.query(*DashboardService._status_counts()).filter(*today_filter).one()
        return {status: int(getattr(row, status) or 0) for status in STATUSES}

    @staticmethod
    def _get_sections(db: Session, today_filter) -> List[Dict]:
        """Per section: today's counts by status and the most recent run of today"""
        counts = db.query(
            CheckRun.section_id,
            *DashboardService._status_counts(),
        ).filter(*today_filter).group_by(CheckRun.section_id).all()
        counts_by_section = {r.section_id: r for r in counts}

        # Most recent run per section: rank by started_at inside each section
        ranked = db.query(
            CheckRun.id,
            CheckRun.section_id,
            CheckRun.status,
            CheckRun.started_at,
            CheckRun.employee_id,
            func.row_number().over(
                partition_by=CheckRun.section_id,
                order_by=(CheckRun.started_at.desc(), CheckRun.id.desc()),
            ).label('rn'),
        ).filter(*today_filter).subquery()

        last_runs = db.query(
            ranked.c.id,
            ranked.c.section_id,
            ranked.c.status,
            ranked.c.started_at,
            User.full_name,
            User.email,
        ).outerjoin(
            User, User.id == ranked.c.employee_id
        ).filter(ranked.c.rn == 1).all()
        last_by_section = {r.section_id: r for r in last_runs}

        sections = db.query(Section).order_by(Section.name.asc()).all()

        result = []
        for s in sections:
            c = counts_by_section.get(s.id)
            lr = last_by_section.get(s.id)
            result.append({
                "section_id": s.id,
                "section_name": s.name,
                "is_active": s.is_active,
                "in_progress": int(c.in_progress) if c else 0,
                "submitted": int(c.submitted) if c else 0,
                "reviewed": int(c.reviewed) if c else 0,
                "last_run_id": lr.id if lr else None,
                "last_status": lr.status if lr else None,
                "last_started_at": lr.started_at if lr else None,
                "last_employee_name": lr.full_name if lr else None,
                "last_employee_email": lr.email if lr else None,
            })
        return result
