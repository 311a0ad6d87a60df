# tests/conftest.py
import os
import tempfile

import pytest

# La configuración se lee al importar app.*: variables antes de cualquier import
_DB_DIR = tempfile.mkdtemp(prefix="medtrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import Base, SessionLocal, create_tables, engine  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import UserRole  # noqa: E402
from tests.factories import make_user  # noqa: E402


@pytest.fixture
def db():
    """Esquema limpio por test"""
    Base.metadata.drop_all(bind=engine)
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    return TestClient(app)


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def nurse(db):
    return make_user(db, email="enfermera@hospital.org", role=UserRole.NURSE)


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@hospital.org", role=UserRole.ADMIN)


@pytest.fixture
def pharmacist(db):
    return make_user(db, email="farmacia@hospital.org", role=UserRole.PHARMACY)


@pytest.fixture
def nurse_headers(nurse):
    return auth_headers(nurse)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def pharmacy_headers(pharmacist):
    return auth_headers(pharmacist)
