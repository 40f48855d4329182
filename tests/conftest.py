import os
import tempfile

# must be set before agrosphere.core.config is imported
_TMP_DIR = tempfile.mkdtemp(prefix="agrosphere-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["AUTH_VERIFY_MODE"] = "hs256"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["ADMIN_TOKEN"] = "admin-secret"
os.environ["NOTIFIER_BACKEND"] = "database"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "INFO"

import pytest
from fastapi.testclient import TestClient

from agrosphere.core.auth import create_access_token
from agrosphere.core.db import Base, SessionLocal, engine
from agrosphere.main import app
from agrosphere.modules.users.models import User


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, user_id, kind, text):
        self.calls.append((user_id, kind, text))


class FailingNotifier:
    def notify(self, user_id, kind, text):
        raise RuntimeError("dispatcher unavailable")


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(user_id, name=None, area=None, city=None, country=None, is_banned=False):
        user = User(
            id=user_id,
            name=name or f"Farmer {user_id}",
            area=area,
            city=city,
            country=country,
            is_banned=is_banned,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def notifier():
    return RecordingNotifier()


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
