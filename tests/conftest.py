"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.profile import Profile, UserSkill  # noqa: E402, F401
from app.models.revoked_token import RevokedToken  # noqa: E402, F401
from app.models.user import User  # noqa: E402, F401
from app.services.auth import AuthService  # noqa: E402
from app.services.jwt import SessionClaim, get_jwt_service  # noqa: E402


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(db_session: Session):
    """Factory that creates a user and returns its id, email and a bearer token."""

    def _make_user(email: str, password: str = "password123") -> dict:
        user = AuthService().register(db_session, email, password)
        token = get_jwt_service().issue_token(SessionClaim(id=user.id, email=user.email))
        return {"user_id": user.id, "email": user.email, "token": token}

    return _make_user


@pytest.fixture(name="test_user")
def test_user_fixture(make_user):
    """Create a test user and return its data plus a token."""
    return make_user("test@example.com")


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(test_user: dict) -> dict:
    return {"Authorization": f"Bearer {test_user['token']}"}
