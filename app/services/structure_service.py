"""
Checklist structure administration (sections and items).
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.core.errors import Conflict, InvalidInput, NotFound
from app.db.session import transaction
from app.models.check_entry import CheckEntry
from app.models.check_item import CheckItem
from app.models.check_run import CheckRun
from app.models.section import Section
from app.schemas.structure import ItemCreate, ItemUpdate, SectionCreate, SectionUpdate

logger = logging.getLogger(__name__)


def _section_name(name: str) -> str:
    name = name.strip().upper()
    if not name:
        raise InvalidInput("Missing field: name")
    return name


def _clean_instructions(value):
    if value is None:
        return None
    return value.strip() or None


class StructureService:

    # ── Employee facing ──────────────────────────────────────────────────

    @staticmethod
    def list_active_sections(db: Session) -> List[Section]:
        return db.query(Section).filter(
            Section.is_active.is_(True)
        ).order_by(Section.name.asc()).all()

    @staticmethod
    def list_active_items(db: Session, section_id: int) -> List[CheckItem]:
        return db.query(CheckItem).filter(
            CheckItem.section_id == section_id,
            CheckItem.is_active.is_(True),
        ).order_by(CheckItem.sort_order.asc(), CheckItem.id.asc()).all()

    # ── Admin ────────────────────────────────────────────────────────────

    @staticmethod
    def list_structure(db: Session) -> Dict[str, Any]:
        sections = db.query(Section).order_by(Section.name.asc()).all()
        items = db.query(CheckItem).order_by(
            CheckItem.section_id.asc(), CheckItem.sort_order.asc(), CheckItem.id.asc()
        ).all()
        return {"sections": sections, "items": items}

    @staticmethod
    def create_section(db: Session, payload: SectionCreate) -> Section:
        section = Section(name=_section_name(payload.name), is_active=True)
        with transaction(db):
            db.add(section)
        db.refresh(section)
        logger.info("Section %d '%s' created", section.id, section.name)
        return section

    @staticmethod
    def update_section(db: Session, section_id: int, payload: SectionUpdate) -> Section:
        section = db.query(Section).filter(Section.id == section_id).first()
        if not section:
            raise NotFound("Section not found")

        data = payload.model_dump(exclude_unset=True)
        if data.get("name") is not None:
            section.name = _section_name(data["name"])
        if data.get("is_active") is not None:
            section.is_active = data["is_active"]

        with transaction(db):
            db.add(section)
        db.refresh(section)
        return section

    @staticmethod
    def create_item(db: Session, payload: ItemCreate) -> CheckItem:
        if not db.query(Section).filter(Section.id == payload.section_id).first():
            raise NotFound("Section not found")
        title = payload.title.strip()
        if not title:
            raise InvalidInput("Missing field: title")

        item = CheckItem(
            section_id=payload.section_id,
            title=title,
            instructions=_clean_instructions(payload.instructions),
            requires_photo=payload.requires_photo,
            requires_note_on_fail=payload.requires_note_on_fail,
            sort_order=payload.sort_order,
            is_active=payload.is_active,
        )
        with transaction(db):
            db.add(item)
        db.refresh(item)
        logger.info("Item %d created in section %d", item.id, item.section_id)
        return item

    @staticmethod
    def update_item(db: Session, item_id: int, payload: ItemUpdate) -> CheckItem:
        item = db.query(CheckItem).filter(CheckItem.id == item_id).first()
        if not item:
            raise NotFound("Item not found")

        data = payload.model_dump(exclude_unset=True)
        if "title" in data:
            title = (data.pop("title") or "").strip()
            if not title:
                raise InvalidInput("title cannot be blank")
            item.title = title
        if "instructions" in data:
            item.instructions = _clean_instructions(data.pop("instructions"))
        for key, value in data.items():
            if value is not None:
                setattr(item, key, value)

        with transaction(db):
            db.add(item)
        db.refresh(item)
        return item

    @staticmethod
    def delete_item(db: Session, item_id: int, force: bool = False) -> int:
        """
        Delete an item. Refused while entries reference it unless ``force``,
        in which case those entries go first in the same transaction.
        Returns the number of entries removed.
        """
        item = db.query(CheckItem).filter(CheckItem.id == item_id).first()
        if not item:
            raise NotFound("Item not found")

        has_entries = db.query(CheckEntry.id).filter(CheckEntry.item_id == item_id).first() is not None
        if has_entries and not force:
            logger.warning("Refused to delete item %d: it has entries", item_id)
            raise Conflict(
                "Item already has recorded entries. Deactivate it or use forced deletion.",
                code="HAS_ENTRIES",
            )

        removed = 0
        with transaction(db):
            if force:
                removed = db.query(CheckEntry).filter(
                    CheckEntry.item_id == item_id
                ).delete(synchronize_session=False)
            db.query(CheckItem).filter(CheckItem.id == item_id).delete(synchronize_session=False)

        logger.info("Item %d deleted (force=%s, %d entries removed)", item_id, force, removed)
        return removed

    @staticmethod
    def delete_section(db: Session, section_id: int) -> None:
        section = db.query(Section).filter(Section.id == section_id).first()
        if not section:
            raise NotFound("Section not found")

        if db.query(CheckItem.id).filter(CheckItem.section_id == section_id).first() is not None:
            logger.warning("Refused to delete section %d: it has items", section_id)
            raise Conflict(
                "Section has items. Delete the items first or deactivate the section.",
                code="HAS_ITEMS",
            )
        if db.query(CheckRun.id).filter(CheckRun.section_id == section_id).first() is not None:
            logger.warning("Refused to delete section %d: it has runs", section_id)
            raise Conflict(
                "Section has recorded runs. Deactivate it instead of deleting.",
                code="HAS_RUNS",
            )

        with transaction(db):
            db.query(Section).filter(Section.id == section_id).delete(synchronize_session=False)
        logger.info("Section %d deleted", section_id)
