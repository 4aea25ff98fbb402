from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require
from app.core.security import Principal
from app.schemas.structure import (
    ItemCreate, ItemRead, ItemUpdate, SectionCreate, SectionRead, SectionUpdate, StructureRead,
)
from app.services.authorization import Action
from app.services.structure_service import StructureService

router = APIRouter()


@router.get("/structure", response_model=StructureRead)
def list_structure(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_STRUCTURE)),
):
    """Every section and item, inactive ones included."""
    return StructureService.list_structure(db)


@router.post("/sections", response_model=SectionRead, status_code=status.HTTP_201_CREATED)
def create_section(
    payload: SectionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_STRUCTURE)),
):
    return StructureService.create_section(db, payload)


@router.put("/sections/{section_id}", response_model=SectionRead)
def update_section(
    section_id: int,
    payload: SectionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_STRUCTURE)),
):
    return StructureService.update_section(db, section_id, payload)


@router.delete("/sections/{section_id}")
def delete_section(
    section_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.DELETE_STRUCTURE)),
) -> dict:
    StructureService.delete_section(db, section_id)
    return {"ok": True, "section_id": section_id}


@router.post("/items", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: ItemCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_STRUCTURE)),
):
    return StructureService.create_item(db, payload)


@router.put("/items/{item_id}", response_model=ItemRead)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_STRUCTURE)),
):
    return StructureService.update_item(db, item_id, payload)


@router.delete("/items/{item_id}")
def delete_item(
    item_id: int,
    force: bool = Query(False, description="Also delete entries recorded for this item"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.DELETE_STRUCTURE)),
) -> dict:
    removed = StructureService.delete_item(db, item_id, force=force)
    return {"ok": True, "item_id": item_id, "entries_deleted": removed}
