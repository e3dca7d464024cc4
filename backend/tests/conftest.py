import os
import tempfile

# Must be set before ``app`` is imported anywhere
os.environ.setdefault("PYTEST_RUN", "1")
os.environ.setdefault("DEFAULT_ADMIN_BOOTSTRAP", "0")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="cleaning-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.models import Client
from app.models.base import BaseModel
from app.api.dependencies import get_db
from app.api.auth import token_for
from app.utils.auth import get_password_hash


@pytest.fixture
def Session():
    """Fresh in-memory database wired into the app for one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    def override_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    yield Session
    app.dependency_overrides.pop(get_db, None)
    engine.dispose()


@pytest.fixture
def client(Session):
    return TestClient(app)


@pytest.fixture
def make_user(Session):
    """Create an account directly and return ``(user, auth_headers)``."""

    def _make(email="casey@test.com", is_admin=False, first_name="Casey", last_name="Client", password="pw"):
        db = Session()
        user = Client(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=get_password_hash(password),
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        db.close()
        return user, {"Authorization": f"Bearer {token_for(user)}"}

    return _make


@pytest.fixture
def anna(make_user):
    return make_user(email="anna@test.com", is_admin=True, first_name="Anna", last_name="Johnson")
