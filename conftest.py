import os
import tempfile

# Settings are read at import time, so they must be in place before the app loads
_TMP_DIR = tempfile.mkdtemp(prefix="intern_tracker_test_")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from main import app
from intern_tracker.config import ADMIN, STUDENT
from intern_tracker.database import Base, engine, SessionLocal
from intern_tracker.models import User
from intern_tracker.reference_data import seed_reference_data
from intern_tracker.security import create_access_token, hash_password


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_reference_data(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db):
    def _make(name, email, role=STUDENT, password="secret123", **fields):
        user = User(
            name=name,
            email=email,
            role=role,
            password_hash=hash_password(password),
            **fields
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture()
def admin(make_user):
    return make_user("System Administrator", "admin@mail.com", role=ADMIN, password="admin123")


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture()
def student(make_user):
    return make_user(
        "John Doe", "john.doe@mail.com",
        department="Frontend Development", supervisor="Sarah Johnson", status="active"
    )


@pytest.fixture()
def student_headers(student):
    return auth_headers(student)
