from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_photo_store
from app.core.config import settings
from app.db.base import Base
from app.main import app
from app.models import CheckItem, Section, User
from app.services.photo_store import LocalPhotoStore


def issue_token(user_id: int, *, secret: str = None, expires_in: int = 30 * 60) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user.id)}"}


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture()
def photo_store(tmp_path):
    return LocalPhotoStore(base_dir=tmp_path / "uploads", url_prefix="/uploads/checks")


@pytest.fixture()
def client(db, photo_store):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_photo_store] = lambda: photo_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(role: str = "employee", name: str = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            full_name=name or f"User {n}",
            email=f"user{n}@example.com",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_section(db):
    def _make(name: str = "COCINA", is_active: bool = True) -> Section:
        section = Section(name=name, is_active=is_active)
        db.add(section)
        db.commit()
        db.refresh(section)
        return section

    return _make


@pytest.fixture()
def make_item(db):
    def _make(section: Section, title: str = "Piso limpio", **flags) -> CheckItem:
        item = CheckItem(
            section_id=section.id,
            title=title,
            requires_photo=flags.get("requires_photo", False),
            requires_note_on_fail=flags.get("requires_note_on_fail", True),
            sort_order=flags.get("sort_order", 0),
            is_active=flags.get("is_active", True),
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture()
def employee(make_user):
    return make_user("employee", "Eva Employee")


@pytest.fixture()
def supervisor(make_user):
    return make_user("supervisor", "Sam Supervisor")


@pytest.fixture()
def admin(make_user):
    return make_user("admin", "Ada Admin")
