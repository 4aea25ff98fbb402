# app/services/check_run_service.py
"""
Check-run lifecycle engine.

Runs move strictly forward: in_progress -> submitted -> reviewed. Every
operation resolves authorization and validation before touching the store,
so a refused call never leaves partial state behind.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from app.core.errors import (
    Internal, InvalidInput, InvalidState, NotFound, ValidationFailed,
)
from app.core.security import Principal
from app.models.check_entry import CheckEntry
from app.models.check_run import CheckRun
from app.models.enums import EntryResultEnum, RunStatusEnum
from app.repositories.checklist_repository import ChecklistRepository
from app.services.authorization import Action, ensure_allowed
from app.services.photo_store import (
    ExistingPhotoUrl, NewPhoto, NoPhoto, PhotoInput, PhotoStore,
    normalize_content_type, validate_photo_input,
)
from app.services.utils.clock import as_utc, business_day_bounds, utcnow

logger = logging.getLogger(__name__)

MIN_FAIL_NOTE_LENGTH = 3

# Allowed target states per current state. Re-review is permitted and
# overwrites the previous review.
TRANSITIONS = {
    RunStatusEnum.IN_PROGRESS.value: {RunStatusEnum.SUBMITTED.value},
    RunStatusEnum.SUBMITTED.value: {RunStatusEnum.REVIEWED.value},
    RunStatusEnum.REVIEWED.value: {RunStatusEnum.REVIEWED.value},
}

RUN_STATUSES = {s.value for s in RunStatusEnum}
ENTRY_RESULTS = {r.value for r in EntryResultEnum}


def _require_id(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid {name}")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid {name}")
    if parsed <= 0 or str(parsed) != str(value).strip():
        raise InvalidInput(f"Invalid {name}")
    return parsed


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CheckRunService:

    # ─────────────────────────────────────────────────────────────────────────
    # READ
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _load_run(repo: ChecklistRepository, run_id: Any) -> CheckRun:
        run = repo.get_run(_require_id(run_id, "run id"))
        if not run:
            raise NotFound("Run not found")
        return run

    @staticmethod
    def get_run_status(repo: ChecklistRepository, principal: Principal, section_id: Any) -> Optional[CheckRun]:
        """Latest run (any status) of the caller for a section, or None."""
        return repo.latest_run(principal.id, _require_id(section_id, "section_id"))

    @staticmethod
    def list_my_runs(
        repo: ChecklistRepository,
        principal: Principal,
        status: Optional[str] = None,
        limit: int = 200,
    ) -> List[Dict[str, Any]]:
        status_filter = status if status in RUN_STATUSES else None
        return repo.list_employee_runs(principal.id, status_filter, limit)

    @staticmethod
    def get_run(repo: ChecklistRepository, principal: Principal, run_id: Any) -> Dict[str, Any]:
        run = CheckRunService._load_run(repo, run_id)
        ensure_allowed(principal, Action.VIEW_RUN, run)
        return {
            "run": repo.describe_run(run),
            "entries": repo.list_run_entries(run.id),
        }

    @staticmethod
    def list_runs(
        repo: ChecklistRepository,
        principal: Principal,
        limit: int = 500,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        ensure_allowed(principal, Action.LIST_RUNS)
        if filters.get("status") not in RUN_STATUSES:
            filters["status"] = None
        for bound in ("date_from", "date_to"):
            if filters.get(bound) is not None:
                filters[bound] = as_utc(filters[bound])
        return repo.list_runs(limit=limit, **filters)

    # ─────────────────────────────────────────────────────────────────────────
    # CREATE / REUSE
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def create_run(repo: ChecklistRepository, principal: Principal, section_id: Any) -> Tuple[CheckRun, bool]:
        """
        Return the caller's open run for the section started today, or start
        a new one. The second element tells whether the run was reused.
        """
        section_id = _require_id(section_id, "section_id")
        ensure_allowed(principal, Action.CREATE_RUN)

        if not repo.get_section(section_id):
            raise NotFound("Section not found")

        day_start, day_end = business_day_bounds()
        existing = repo.find_open_run(principal.id, section_id, day_start, day_end)
        if existing:
            logger.info("Reusing run %d for employee %d / section %d", existing.id, principal.id, section_id)
            return existing, True

        with repo.transaction():
            run = repo.add_run(principal.id, section_id, utcnow())
        logger.info("Created run %d for employee %d / section %d", run.id, principal.id, section_id)
        return run, False

    # ─────────────────────────────────────────────────────────────────────────
    # ENTRY UPSERT
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def upsert_entry(
        repo: ChecklistRepository,
        photos: PhotoStore,
        principal: Principal,
        run_id: Any,
        item_id: Any,
        result: str,
        note: Optional[str] = None,
        photo: PhotoInput = NoPhoto(),
    ) -> CheckEntry:
        """
        Record (or overwrite) the result of one item in an open run.

        Checks, in order: run exists, caller may edit it, run is still
        in_progress, item exists, photo requirement, fail-note requirement.
        A new upload is stored first; the entry row is then upserted on
        (run_id, item_id), keeping the previous photo unless replaced.
        """
        # Input shape (nothing touched yet)
        item_id = _require_id(item_id, "item_id")
        if result not in ENTRY_RESULTS:
            raise InvalidInput("result must be pass|fail|na")
        photo = validate_photo_input(photo)

        run = CheckRunService._load_run(repo, run_id)
        ensure_allowed(principal, Action.UPSERT_ENTRY, run)
        if run.status != RunStatusEnum.IN_PROGRESS.value:
            raise InvalidState("Run is not editable")

        item = repo.get_item(item_id)
        if not item:
            raise InvalidInput("Item not found")

        existing = repo.get_entry(run.id, item.id)
        has_photo = (
            not isinstance(photo, NoPhoto)
            or bool(existing is not None and existing.photo_url)
        )
        if item.requires_photo and not has_photo:
            raise ValidationFailed("This item requires a photo")

        if (
            item.requires_note_on_fail
            and result == EntryResultEnum.FAIL.value
            and len((note or "").strip()) < MIN_FAIL_NOTE_LENGTH
        ):
            raise ValidationFailed("A failed item requires a note describing the problem")

        new_url: Optional[str] = None
        stored_url: Optional[str] = None
        if isinstance(photo, NewPhoto):
            try:
                stored_url = photos.save(photo.content, normalize_content_type(photo), photo.filename)
            except OSError:
                logger.exception("Photo store failed for run %d item %d", run.id, item.id)
                raise Internal()
            new_url = stored_url
        elif isinstance(photo, ExistingPhotoUrl):
            new_url = photo.url.strip()

        try:
            with repo.transaction():
                entry = repo.upsert_entry(
                    run_id=run.id,
                    item_id=item.id,
                    result=result,
                    note=note if note else None,
                    photo_url=new_url,
                    touched_at=utcnow(),
                )
        except Exception:
            if stored_url:
                logger.warning("Entry upsert failed, discarding uploaded photo %s", stored_url)
                try:
                    photos.delete(stored_url)
                except OSError:
                    logger.exception("Could not delete orphaned photo %s", stored_url)
            raise

        logger.info(
            "Entry upserted: run=%d item=%d result=%s photo=%s",
            run.id, item.id, result, "new" if new_url else "kept",
        )
        return entry

    # ─────────────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _advance(repo: ChecklistRepository, run: CheckRun, target: str, **fields: Any) -> CheckRun:
        if target not in TRANSITIONS.get(run.status, set()):
            raise InvalidState(f"Cannot move run from '{run.status}' to '{target}'")
        with repo.transaction():
            return repo.transition_run(run, target, **fields)

    @staticmethod
    def submit_run(repo: ChecklistRepository, principal: Principal, run_id: Any) -> CheckRun:
        run = CheckRunService._load_run(repo, run_id)
        ensure_allowed(principal, Action.SUBMIT_RUN, run)
        if run.status != RunStatusEnum.IN_PROGRESS.value:
            raise InvalidState("Run already submitted/reviewed")

        # At least one entry; full coverage is only a client-side nudge.
        if repo.count_entries(run.id) == 0:
            raise ValidationFailed("Cannot submit an empty run")

        run = CheckRunService._advance(
            repo, run, RunStatusEnum.SUBMITTED.value, submitted_at=utcnow(),
        )
        logger.info("Run %d submitted by user %d", run.id, principal.id)
        return run

    @staticmethod
    def review_run(
        repo: ChecklistRepository,
        principal: Principal,
        run_id: Any,
        review_note: Optional[str] = None,
    ) -> CheckRun:
        run = CheckRunService._load_run(repo, run_id)
        ensure_allowed(principal, Action.REVIEW_RUN, run)
        if run.status == RunStatusEnum.IN_PROGRESS.value:
            raise InvalidState("Run must be submitted first")

        if run.status == RunStatusEnum.REVIEWED.value:
            logger.info("Run %d re-reviewed by user %d (was %s)", run.id, principal.id, run.reviewed_by)

        run = CheckRunService._advance(
            repo,
            run,
            RunStatusEnum.REVIEWED.value,
            reviewed_at=utcnow(),
            reviewed_by=principal.id,
            review_note=_clean_text(review_note),
        )
        logger.info("Run %d reviewed by user %d", run.id, principal.id)
        return run

    # ─────────────────────────────────────────────────────────────────────────
    # DELETE
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def delete_run(repo: ChecklistRepository, principal: Principal, run_id: Any) -> int:
        run = CheckRunService._load_run(repo, run_id)
        ensure_allowed(principal, Action.DELETE_RUN, run)
        run_pk = run.id
        with repo.transaction():
            removed = repo.delete_run(run_pk)
        logger.info("Run %d deleted by user %d (%d entries)", run_pk, principal.id, removed)
        return removed
