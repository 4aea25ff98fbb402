from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db, require
from app.core.config import settings
from app.core.errors import NotFound
from app.core.security import Principal
from app.schemas.user import RoleUpdate, UserRead
from app.services.authorization import Action
from app.services.user_service import UserService

router = APIRouter()


@router.get("/auth/me", response_model=UserRead)
def me(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    user = UserService.get_user(db, principal.id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/admin/users", response_model=List[UserRead])
def list_users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_USERS)),
):
    return UserService.list_users(db, limit=settings.USERS_LIMIT)


@router.put("/admin/users/{user_id}/role", response_model=UserRead)
def set_user_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(Action.MANAGE_USERS)),
):
    return UserService.set_role(db, user_id, payload.role)
