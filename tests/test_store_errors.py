"""Tests for database failures surfacing as generic 500s."""

import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.errors import StoreError
from app.models.user import User
from app.services.password_reset import PasswordResetService
from app.services.passwords import PasswordHasher

GENERIC_BODY = {"message": "Internal server error"}


def _db_failure(detail: str = "database is locked") -> OperationalError:
    return OperationalError("UPDATE users", {}, Exception(detail))


@pytest.fixture(name="reset_service")
def reset_service_fixture():
    return PasswordResetService(hasher=PasswordHasher(rounds=4), expire_minutes=30)


def _get_user(db_session: Session) -> User:
    db_session.expire_all()
    return db_session.query(User).filter(User.email == "test@example.com").first()


class TestStoreFailuresOverHTTP:
    """Tests for the database error handlers."""

    def test_unhandled_database_error_is_generic_500(
        self, client: TestClient, auth_headers: dict, db_session: Session, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.ERROR, logger="hundred_networks"):
            with patch.object(db_session, "get", side_effect=_db_failure("disk I/O error")):
                response = client.get("/api/v1/profile", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == GENERIC_BODY
        assert "disk I/O error" not in response.text
        assert "Database error on GET /api/v1/profile" in caplog.text
        assert "disk I/O error" in caplog.text

    def test_reset_store_failure_is_generic_500(
        self,
        client: TestClient,
        test_user: dict,
        db_session: Session,
        reset_service: PasswordResetService,
        caplog: pytest.LogCaptureFixture,
    ):
        token = reset_service.request_reset(db_session, "test@example.com")

        with caplog.at_level(logging.ERROR, logger="hundred_networks"):
            with patch.object(db_session, "execute", side_effect=_db_failure()):
                response = client.post(
                    "/api/v1/auth/reset-password", json={"token": token, "newPassword": "newpassword456"}
                )

        assert response.status_code == 500
        assert response.json() == GENERIC_BODY
        assert "StoreError on POST /api/v1/auth/reset-password" in caplog.text
        assert "database is locked" in caplog.text


class TestCompleteResetStoreFailures:
    """Tests for complete_reset when the database fails underneath it."""

    def test_execute_failure_raises_store_error(
        self, db_session: Session, test_user: dict, reset_service: PasswordResetService
    ):
        token = reset_service.request_reset(db_session, "test@example.com")

        with patch.object(db_session, "execute", side_effect=_db_failure()), patch.object(
            db_session, "rollback", wraps=db_session.rollback
        ) as rollback:
            with pytest.raises(StoreError) as exc_info:
                reset_service.complete_reset(db_session, token, "newpassword456")

        assert rollback.called
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert exc_info.value.to_dict() == GENERIC_BODY

    def test_commit_failure_rolls_back_the_update(
        self, db_session: Session, test_user: dict, reset_service: PasswordResetService
    ):
        token = reset_service.request_reset(db_session, "test@example.com")
        ticket_hash = _get_user(db_session).reset_token_hash

        with patch.object(db_session, "commit", side_effect=_db_failure()), patch.object(
            db_session, "rollback", wraps=db_session.rollback
        ) as rollback:
            with pytest.raises(StoreError):
                reset_service.complete_reset(db_session, token, "newpassword456")

        assert rollback.called
        user = _get_user(db_session)
        assert user.reset_token_hash == ticket_hash
        assert reset_service.hasher.verify("password123", user.password_hash)
        assert not reset_service.hasher.verify("newpassword456", user.password_hash)
