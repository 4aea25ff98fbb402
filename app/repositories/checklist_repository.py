# app/repositories/checklist_repository.py
"""
Storage port for the check-run engine.

``CheckRunService`` only talks to ``ChecklistRepository``; the SQLAlchemy
implementation below is the production adapter, tests may plug in an
in-memory one. Multi-statement effects must run inside ``transaction()``.
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Any, ContextManager, Dict, Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.db.session import transaction
from app.models.check_entry import CheckEntry
from app.models.check_item import CheckItem
from app.models.check_run import CheckRun
from app.models.section import Section
from app.models.user import User


class ChecklistRepository(ABC):

    @abstractmethod
    def transaction(self) -> ContextManager[Any]:
        ...

    # ── Structure (read only for the engine) ──────────────────────────────

    @abstractmethod
    def get_section(self, section_id: int) -> Optional[Section]:
        ...

    @abstractmethod
    def get_item(self, item_id: int) -> Optional[CheckItem]:
        ...

    # ── Runs ──────────────────────────────────────────────────────────────

    @abstractmethod
    def get_run(self, run_id: int) -> Optional[CheckRun]:
        ...

    @abstractmethod
    def find_open_run(
        self, employee_id: int, section_id: int, day_start: datetime, day_end: datetime,
    ) -> Optional[CheckRun]:
        """Newest in_progress run of the employee for the section started in [day_start, day_end)."""
        ...

    @abstractmethod
    def latest_run(self, employee_id: int, section_id: int) -> Optional[CheckRun]:
        ...

    @abstractmethod
    def add_run(self, employee_id: int, section_id: int, started_at: datetime) -> CheckRun:
        ...

    @abstractmethod
    def transition_run(self, run: CheckRun, status: str, **fields: Any) -> CheckRun:
        ...

    @abstractmethod
    def delete_run(self, run_id: int) -> int:
        """Delete the run's entries then the run. Returns the number of entries removed."""
        ...

    @abstractmethod
    def describe_run(self, run: CheckRun) -> Dict[str, Any]:
        """Run fields plus section name and employee name/email."""
        ...

    @abstractmethod
    def list_employee_runs(self, employee_id: int, status: Optional[str], limit: int) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_runs(
        self,
        *,
        status: Optional[str] = None,
        section_id: Optional[int] = None,
        employee_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 500,
    ) -> List[Dict[str, Any]]:
        ...

    # ── Entries ───────────────────────────────────────────────────────────

    @abstractmethod
    def get_entry(self, run_id: int, item_id: int) -> Optional[CheckEntry]:
        ...

    @abstractmethod
    def upsert_entry(
        self,
        run_id: int,
        item_id: int,
        result: str,
        note: Optional[str],
        photo_url: Optional[str],
        touched_at: datetime,
    ) -> CheckEntry:
        """
        Insert or update the single entry for (run_id, item_id). A None
        ``photo_url`` keeps the photo already on record.
        """
        ...

    @abstractmethod
    def count_entries(self, run_id: int) -> int:
        ...

    @abstractmethod
    def list_run_entries(self, run_id: int) -> List[Dict[str, Any]]:
        """Entries joined with item metadata, ordered by item sort_order then entry created_at."""
        ...


def _run_dict(run: CheckRun) -> Dict[str, Any]:
    return {
        "id": run.id,
        "employee_id": run.employee_id,
        "section_id": run.section_id,
        "status": run.status,
        "started_at": run.started_at,
        "submitted_at": run.submitted_at,
        "reviewed_at": run.reviewed_at,
        "reviewed_by": run.reviewed_by,
        "review_note": run.review_note,
    }


class SqlAlchemyChecklistRepository(ChecklistRepository):

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with transaction(self.db) as db:
            yield db

    def get_section(self, section_id: int) -> Optional[Section]:
        return self.db.query(Section).filter(Section.id == section_id).first()

    def get_item(self, item_id: int) -> Optional[CheckItem]:
        return self.db.query(CheckItem).filter(CheckItem.id == item_id).first()

    def get_run(self, run_id: int) -> Optional[CheckRun]:
        return self.db.query(CheckRun).filter(CheckRun.id == run_id).first()

    def find_open_run(self, employee_id, section_id, day_start, day_end):
        return self.db.query(CheckRun).filter(
            CheckRun.employee_id == employee_id,
            CheckRun.section_id == section_id,
            CheckRun.status == 'in_progress',
            CheckRun.started_at >= day_start,
            CheckRun.started_at < day_end,
        ).order_by(CheckRun.started_at.desc(), CheckRun.id.desc()).first()

    def latest_run(self, employee_id, section_id):
        return self.db.query(CheckRun).filter(
            CheckRun.employee_id == employee_id,
            CheckRun.section_id == section_id,
        ).order_by(CheckRun.started_at.desc(), CheckRun.id.desc()).first()

    def add_run(self, employee_id, section_id, started_at):
        run = CheckRun(
            employee_id=employee_id,
            section_id=section_id,
            status='in_progress',
            started_at=started_at,
        )
        self.db.add(run)
        self.db.flush()
        return run

    def transition_run(self, run, status, **fields):
        run.status = status
        for key, value in fields.items():
            setattr(run, key, value)
        self.db.add(run)
        self.db.flush()
        return run

    def delete_run(self, run_id):
        removed = self.db.query(CheckEntry).filter(
            CheckEntry.run_id == run_id,
        ).delete(synchronize_session=False)
        self.db.query(CheckRun).filter(
            CheckRun.id == run_id,
        ).delete(synchronize_session=False)
        self.db.flush()
        return removed

    def describe_run(self, run):
        data = _run_dict(run)
        data["section_name"] = run.section.name if run.section else None
        data["employee_name"] = run.employee.full_name if run.employee else None
        data["employee_email"] = run.employee.email if run.employee else None
        return data

    def list_employee_runs(self, employee_id, status, limit):
        items_total = (
            select(func.count(CheckItem.id))
            .where(
                CheckItem.section_id == CheckRun.section_id,
                CheckItem.is_active.is_(True),
            )
            .correlate(CheckRun)
            .scalar_subquery()
        )
        entries_done = (
            select(func.count(CheckEntry.id))
            .join(CheckItem, CheckItem.id == CheckEntry.item_id)
            .where(
                CheckEntry.run_id == CheckRun.id,
                CheckItem.is_active.is_(True),
            )
            .correlate(CheckRun)
            .scalar_subquery()
        )

        query = self.db.query(
            CheckRun.id,
            CheckRun.section_id,
            CheckRun.status,
            CheckRun.started_at,
            CheckRun.submitted_at,
            CheckRun.reviewed_at,
            Section.name.label('section_name'),
            items_total.label('items_total'),
            entries_done.label('entries_done'),
        ).join(
            Section, Section.id == CheckRun.section_id
        ).filter(
            CheckRun.employee_id == employee_id
        )
        if status:
            query = query.filter(CheckRun.status == status)

        rows = query.order_by(CheckRun.started_at.desc(), CheckRun.id.desc()).limit(limit).all()
        return [dict(r._mapping) for r in rows]

    def list_runs(
        self,
        *,
        status=None,
        section_id=None,
        employee_id=None,
        date_from=None,
        date_to=None,
        limit=500,
    ):
        query = self.db.query(
            CheckRun.id,
            CheckRun.employee_id,
            User.full_name.label('employee_name'),
            User.email.label('employee_email'),
            CheckRun.section_id,
            Section.name.label('section_name'),
            CheckRun.status,
            CheckRun.started_at,
            CheckRun.submitted_at,
            CheckRun.reviewed_at,
            CheckRun.review_note,
            CheckRun.reviewed_by,
        ).join(
            User, User.id == CheckRun.employee_id
        ).join(
            Section, Section.id == CheckRun.section_id
        )

        if status:
            query = query.filter(CheckRun.status == status)
        if section_id is not None:
            query = query.filter(CheckRun.section_id == section_id)
        if employee_id is not None:
            query = query.filter(CheckRun.employee_id == employee_id)
        if date_from is not None:
            query = query.filter(CheckRun.started_at >= date_from)
        if date_to is not None:
            query = query.filter(CheckRun.started_at <= date_to)

        rows = query.order_by(CheckRun.started_at.desc(), CheckRun.id.desc()).limit(limit).all()
        return [dict(r._mapping) for r in rows]

    def get_entry(self, run_id, item_id):
        return self.db.query(CheckEntry).filter(
            CheckEntry.run_id == run_id,
            CheckEntry.item_id == item_id,
        ).first()

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise NotImplementedError(f"Entry upsert not supported on dialect '{dialect}'")

    def upsert_entry(self, run_id, item_id, result, note, photo_url, touched_at):
        insert = self._insert()
        stmt = insert(CheckEntry).values(
            run_id=run_id,
            item_id=item_id,
            result=result,
            note=note,
            photo_url=photo_url,
            created_at=touched_at,
        )
        # Natural-key conflict resolution: last writer wins on result/note,
        # the stored photo survives unless a new one is supplied.
        stmt = stmt.on_conflict_do_update(
            index_elements=['run_id', 'item_id'],
            set_={
                'result': stmt.excluded.result,
                'note': stmt.excluded.note,
                'photo_url': func.coalesce(stmt.excluded.photo_url, CheckEntry.photo_url),
                'created_at': stmt.excluded.created_at,
            },
        )
        self.db.execute(stmt)

        return self.db.query(CheckEntry).filter(
            CheckEntry.run_id == run_id,
            CheckEntry.item_id == item_id,
        ).populate_existing().one()

    def count_entries(self, run_id):
        return self.db.query(func.count(CheckEntry.id)).filter(
            CheckEntry.run_id == run_id,
        ).scalar() or 0

    def list_run_entries(self, run_id):
        rows = self.db.query(
            CheckEntry.id,
            CheckEntry.run_id,
            CheckEntry.item_id,
            CheckEntry.result,
            CheckEntry.note,
            CheckEntry.photo_url,
            CheckEntry.created_at,
            CheckItem.title,
            CheckItem.instructions,
            CheckItem.requires_photo,
            CheckItem.requires_note_on_fail,
            CheckItem.sort_order,
        ).join(
            CheckItem, CheckItem.id == CheckEntry.item_id
        ).filter(
            CheckEntry.run_id == run_id
        ).order_by(
            CheckItem.sort_order.asc(), CheckEntry.created_at.asc(), CheckEntry.id.asc()
        ).all()
        return [dict(r._mapping) for r in rows]
