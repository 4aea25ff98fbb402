"""
Principal resolution.

Tokens are issued elsewhere; this module only turns a bearer credential
into the acting ``Principal``. The role is always re-read from the users
table so that a role change applies immediately and a token for a deleted
user stops working.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Unauthenticated
from app.models.enums import STAFF_ROLES, RoleEnum
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    id: int
    role: str

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN.value


def parse_bearer(authorization: Optional[str]) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise Unauthenticated("Missing or invalid Authorization header")
    return token.strip()


def decode_token(token: str) -> int:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", e)
        raise Unauthenticated("Invalid or expired token")

    try:
        return int(payload["id"])
    except (KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid or expired token")


def resolve_principal(db: Session, authorization: Optional[str]) -> Principal:
    user_id = decode_token(parse_bearer(authorization))
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise Unauthenticated("Session is no longer valid, please sign in again")
    return Principal(id=user.id, role=user.role)
