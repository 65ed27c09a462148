"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read once at import time, so the environment is prepared first.
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].replace("/chatop", "/chatop_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"  # cheap hashing keeps the suite fast
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="chatop-images-")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from chatop import models  # noqa: E402, F401
from chatop.database import Base, get_db  # noqa: E402
from chatop.main import app  # noqa: E402

PASSWORD = "password123"  # noqa: S105
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class AuthHeaders(dict):
    """Dict subclass that also stores the user's email and id."""

    def __init__(self, *args, email: str, user_id: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.email = email
        self.user_id = user_id


connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str, name: str = "Test User", password: str = PASSWORD) -> AuthHeaders:
    """Register a user and return auth headers carrying its email and id."""
    response = client.post(
        "/api/auth/register",
        json={"email": email, "name": name, "password": password},
    )
    assert response.status_code == 200, response.text
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    return AuthHeaders(headers, email=email, user_id=me.json()["id"])


def create_rental(client, headers, name: str = "Loft", **fields):
    """Create a rental through the multipart endpoint."""
    data = {"name": name, "surface": "45", "price": "1200", "description": "Bright loft"}
    data.update(fields)
    return client.post(
        "/api/rentals",
        headers=headers,
        data=data,
        files={"picture": ("loft.png", PNG_BYTES, "image/png")},
    )


@pytest.fixture
def auth_headers(client):
    """Create the owner user and return its auth headers."""
    return register(client, "alice@example.com", name="Alice")


@pytest.fixture
def other_headers(client):
    """Create a second user, a prospective tenant."""
    return register(client, "bob@example.com", name="Bob")


@pytest.fixture
def rental(client, auth_headers):
    """A rental owned by the ``auth_headers`` user."""
    response = create_rental(client, auth_headers)
    assert response.status_code == 201, response.text
    return response.json()
