import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidInput, NotFound
from app.db.session import transaction
from app.models.enums import RoleEnum
from app.models.user import User

logger = logging.getLogger(__name__)

ROLES = {r.value for r in RoleEnum}


class UserService:
    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_users(db: Session, limit: int = 200) -> List[User]:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(limit).all()

    @staticmethod
    def set_role(db: Session, user_id: int, role: str) -> User:
        if role not in ROLES:
            raise InvalidInput("Invalid role")

        user = UserService.get_user(db, user_id)
        if not user:
            raise NotFound("User not found")

        previous = user.role
        user.role = role
        with transaction(db):
            db.add(user)
        db.refresh(user)
        logger.info("User %d role changed %s -> %s", user.id, previous, role)
        return user
