from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db
from app.core.security import Principal
from app.schemas.structure import ItemRead, SectionRead
from app.services.structure_service import StructureService

router = APIRouter()


@router.get("", response_model=List[SectionRead])
def list_sections(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> List[SectionRead]:
    """Active sections, by name."""
    return StructureService.list_active_sections(db)


@router.get("/{section_id}/items", response_model=List[ItemRead])
def list_section_items(
    section_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> List[ItemRead]:
    """Active items of a section in checklist order."""
    return StructureService.list_active_items(db, section_id)
