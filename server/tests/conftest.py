"""Pytest configuration and fixtures for catalog tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_search_cache
from app.main import app
from app.models.base import Base
from app.models.user import User, UserRole
from app.services.auth import get_password_hash
from app.services.search_cache import InMemorySearchCache

# Use SQLite in-memory for tests (fast, isolated)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def search_cache() -> InMemorySearchCache:
    """A fresh in-memory cache per test, injected in place of the process-wide one."""
    return InMemorySearchCache()


@pytest.fixture(scope="function")
def client(db: Session, search_cache: InMemorySearchCache) -> Generator[TestClient, None, None]:
    """Create a test client with database and cache overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session here, let the db fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_cache] = lambda: search_cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db: Session, email: str, password: str, role: UserRole, name: str) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        role=role.value,
        display_name=name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(client: TestClient, email: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", data={"username": email, "password": password})
    assert response.status_code == 200, f"Login failed: {response.json()}"
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def academy_user(db: Session) -> User:
    """Create an academy account."""
    return _make_user(db, "academy@example.com", "academypassword123", UserRole.ACADEMY, "DPS")


@pytest.fixture
def other_academy(db: Session) -> User:
    """Create a second academy account."""
    return _make_user(db, "other@example.com", "otherpassword123", UserRole.ACADEMY, "Other")


@pytest.fixture
def student_user(db: Session) -> User:
    """Create a student account."""
    return _make_user(db, "student@example.com", "studentpassword123", UserRole.STUDENT, "Sam")


@pytest.fixture
def academy_headers(client: TestClient, academy_user: User) -> dict[str, str]:
    return _login(client, "academy@example.com", "academypassword123")


@pytest.fixture
def other_academy_headers(client: TestClient, other_academy: User) -> dict[str, str]:
    return _login(client, "other@example.com", "otherpassword123")


@pytest.fixture
def student_headers(client: TestClient, student_user: User) -> dict[str, str]:
    return _login(client, "student@example.com", "studentpassword123")
