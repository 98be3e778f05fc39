import os

# Settings are read at import time; point them at an in-memory database first.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-bookstore-api-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import uuid

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from bookstore.main import app
from bookstore.db.session import build_engine, get_db
from bookstore.models import Base

# Test database
test_engine = build_engine("sqlite+pysqlite:///:memory:")
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)


def override_get_db():
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_test_database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def user_credentials():
    """Unique credentials for a test user."""
    unique_suffix = uuid.uuid4().hex[:8]
    return {
        "email": f"reader-{unique_suffix}@example.com",
        "password": "s3cret-passw0rd",
        "username": f"reader_{unique_suffix}",
    }


@pytest.fixture
def registered_user(test_client, user_credentials):
    """Register a user through the API."""
    response = test_client.post("/auth/register", json=user_credentials)
    assert response.status_code == 201, f"Failed to register user: {response.text}"
    return response.json()["data"]


@pytest.fixture
def access_token(test_client, registered_user, user_credentials):
    """Log the registered user in and return the bearer token."""
    response = test_client.post(
        "/auth/login",
        json={"email": user_credentials["email"], "password": user_credentials["password"]},
    )
    assert response.status_code == 200, f"Failed to log in: {response.text}"
    return response.json()["data"]["access_token"]


@pytest.fixture
def auth_headers(access_token):
    """HTTP headers with a bearer token."""
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def make_genre(test_client):
    """Factory creating genres through the API."""

    def _make(name: str | None = None) -> dict:
        payload = {"name": name or f"Genre {uuid.uuid4().hex[:8]}"}
        response = test_client.post("/genre", json=payload)
        assert response.status_code == 201, f"Failed to create genre: {response.text}"
        return response.json()["data"]

    return _make


@pytest.fixture
def sample_genre(make_genre):
    return make_genre("Computer Science")


@pytest.fixture
def make_book(test_client, sample_genre):
    """Factory creating books through the API."""

    def _make(**overrides) -> dict:
        payload = {
            "title": f"Test Book {uuid.uuid4().hex[:8]}",
            "writer": "Test Writer",
            "publisher": "Test Press",
            "publication_year": 2023,
            "description": "A book used in tests",
            "price": 29.99,
            "stock_quantity": 10,
            "genre_id": sample_genre["id"],
        }
        payload.update(overrides)
        response = test_client.post("/books", json=payload)
        assert response.status_code == 201, f"Failed to create book: {response.text}"
        return response.json()["data"]

    return _make


@pytest.fixture
def sample_book(make_book):
    return make_book()


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}


@pytest.fixture
def session_factory():
    """Session factory bound to the test database."""
    return TestSessionLocal
