from typing import Iterator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.security import Principal, resolve_principal
from app.db.session import SessionLocal
from app.repositories.checklist_repository import ChecklistRepository, SqlAlchemyChecklistRepository
from app.services.authorization import Action, ensure_allowed
from app.services.photo_store import LocalPhotoStore, PhotoStore


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> ChecklistRepository:
    return SqlAlchemyChecklistRepository(db)


def get_photo_store() -> PhotoStore:
    return LocalPhotoStore()


def get_current_principal(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Principal:
    return resolve_principal(db, authorization)


def require(action: Action):
    """Dependency factory guarding a route with a resource-less action."""
    def _guard(principal: Principal = Depends(get_current_principal)) -> Principal:
        ensure_allowed(principal, action)
        return principal
    return _guard
