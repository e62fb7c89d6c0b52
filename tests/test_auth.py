"""Tests for authentication endpoints and the bearer-token guard."""

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.revoked_token import RevokedToken
from app.models.user import User
from app.services.jwt import JWTService, SessionClaim


class TestSignup:
    """Tests for user signup."""

    def test_signup_success(self, client: TestClient, db_session: Session):
        """Signup returns a token and creates an empty profile."""
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "new@example.com", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new@example.com"
        assert data["userId"]
        assert data["token"]

        user = db_session.query(User).filter(User.email == "new@example.com").first()
        assert user.profile is not None
        assert user.password_hash != "password123"

    def test_signup_normalizes_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "Mixed.Case@Example.com", "password": "password123"},
        )
        assert response.status_code == 201
        assert response.json()["email"] == "mixed.case@example.com"

    def test_signup_duplicate_email(self, client: TestClient, test_user: dict):
        """Reject duplicate email registration regardless of case."""
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "TEST@example.com", "password": "password123"},
        )
        assert response.status_code == 409
        assert response.json()["message"] == "User already exists"

    def test_signup_short_password(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "short@example.com", "password": "short"},
        )
        assert response.status_code == 400
        data = response.json()
        assert "at least 8 characters" in data["message"]
        assert data["errors"][0]["field"] == "password"

    def test_signup_invalid_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "not-an-email", "password": "password123"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert data["errors"][0]["field"] == "email"

    def test_signup_missing_fields(self, client: TestClient):
        response = client.post("/api/v1/auth/signup", json={})
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"email", "password"}


class TestLogin:
    """Tests for user login."""

    def test_login_success(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "test@example.com"
        assert data["userId"] == test_user["user_id"]
        assert data["token"]

    def test_login_records_last_login(self, client: TestClient, test_user: dict, db_session: Session):
        client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": "password123"})
        user = db_session.get(User, test_user["user_id"])
        assert user.last_login_at is not None

    def test_login_case_insensitive(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "TEST@EXAMPLE.COM", "password": "password123"},
        )
        assert response.status_code == 200

    def test_login_wrong_password_and_unknown_email_look_the_same(self, client: TestClient, test_user: dict):
        wrong_password = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )
        unknown_email = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}

    def test_login_empty_password(self, client: TestClient, test_user: dict):
        response = client.post("/api/v1/auth/login", json={"email": "test@example.com", "password": ""})
        assert response.status_code == 400

    def test_login_without_signing_secret(self, client: TestClient, test_user: dict):
        """A missing secret is a server fault, reported generically."""
        with patch("app.routers.auth.get_jwt_service", return_value=JWTService(secret_key="")):
            response = client.post(
                "/api/v1/auth/login",
                json={"email": "test@example.com", "password": "password123"},
            )
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}


class TestAuthGuard:
    """Tests for bearer-token authorization on protected routes."""

    def test_me_with_valid_token(self, client: TestClient, test_user: dict, auth_headers: dict):
        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"userId": test_user["user_id"], "email": "test@example.com"}

    def test_missing_header(self, client: TestClient):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_malformed_headers(self, client: TestClient, test_user: dict):
        token = test_user["token"]
        for value in (f"Token {token}", f"bearer {token}", "Bearer", f"Bearer {token} extra", token):
            response = client.get("/api/v1/auth/me", headers={"Authorization": value})
            assert response.status_code == 401, value

    def test_failures_are_indistinguishable(self, client: TestClient, test_user: dict):
        """Bad signature, expiry and garbage all produce the same response."""
        forged = JWTService(secret_key="someone-elses-secret").issue_token(
            SessionClaim(id=test_user["user_id"], email=test_user["email"])
        )
        expired = JWTService(expire_minutes=-5).issue_token(
            SessionClaim(id=test_user["user_id"], email=test_user["email"])
        )
        bodies = []
        for token in (forged, expired, "garbage"):
            response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
            assert response.status_code == 401
            bodies.append(response.json())
        assert bodies[0] == bodies[1] == bodies[2]

    def test_every_protected_router_is_guarded(self, client: TestClient):
        for method, path in (
            ("GET", "/api/v1/profile"),
            ("PUT", "/api/v1/profile"),
            ("POST", "/api/v1/profile/skills"),
            ("DELETE", "/api/v1/profile/skills/6f1c1c2e-7a55-4c1b-a2a8-3a7e1d1f0b55"),
            ("GET", "/api/v1/users/search?query=a"),
            ("GET", "/api/v1/users/some-user"),
            ("POST", "/api/v1/auth/logout"),
        ):
            response = client.request(method, path)
            assert response.status_code == 401, path


class TestLogout:
    """Tests for server-side token revocation."""

    def test_logout_revokes_token(self, client: TestClient, auth_headers: dict, db_session: Session):
        response = client.post("/api/v1/auth/logout", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"
        assert db_session.query(RevokedToken).count() == 1

        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 401

    def test_logout_leaves_other_sessions_alone(self, client: TestClient, test_user: dict, auth_headers: dict):
        other = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        ).json()["token"]

        client.post("/api/v1/auth/logout", headers=auth_headers)

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {other}"})
        assert response.status_code == 200


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["app"] == "hundred-networks"

    def test_security_headers(self, client: TestClient):
        response = client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
