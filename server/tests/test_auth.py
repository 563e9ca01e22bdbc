"""Tests for authentication and registration endpoints."""

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.auth import create_access_token, decode_token


class TestLogin:
    """Tests for /api/auth/login endpoint."""

    def test_login_success(self, client: TestClient, academy_user: User):
        response = client.post(
            "/api/auth/login",
            data={"username": "academy@example.com", "password": "academypassword123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"

    def test_login_email_is_case_insensitive(self, client: TestClient, academy_user: User):
        response = client.post(
            "/api/auth/login",
            data={"username": " Academy@Example.com ", "password": "academypassword123"},
        )
        assert response.status_code == 200

    def test_login_wrong_password(self, client: TestClient, academy_user: User):
        response = client.post(
            "/api/auth/login",
            data={"username": "academy@example.com", "password": "wrongpassword"},
        )
        assert response.status_code == 401

    def test_login_nonexistent_user(self, client: TestClient):
        response = client.post(
            "/api/auth/login",
            data={"username": "nobody@example.com", "password": "whatever123"},
        )
        assert response.status_code == 401
        assert "incorrect" in response.json()["detail"].lower()

    def test_inactive_user_rejected(self, client: TestClient, academy_user: User, db: Session):
        academy_user.is_active = False
        db.commit()
        response = client.post(
            "/api/auth/login",
            data={"username": "academy@example.com", "password": "academypassword123"},
        )
        assert response.status_code == 400


class TestAuthMe:
    def test_me_authenticated(self, client: TestClient, academy_headers: dict):
        response = client.get("/api/auth/me", headers=academy_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "academy@example.com"
        assert data["role"] == "academy"
        assert "password_hash" not in data

    def test_me_no_token(self, client: TestClient):
        assert client.get("/api/auth/me").status_code == 401

    def test_me_invalid_token(self, client: TestClient):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer invalidtoken"})
        assert response.status_code == 401

    def test_me_expired_token(self, client: TestClient, academy_user: User):
        token = create_access_token(
            {"sub": academy_user.email}, expires_delta=timedelta(minutes=-1)
        )
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_me_token_for_deleted_account(self, client: TestClient):
        token = create_access_token({"sub": "ghost@example.com"})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestTokens:
    def test_decode_round_trip(self):
        token = create_access_token({"sub": "a@example.com"})
        assert decode_token(token).email == "a@example.com"

    def test_decode_rejects_missing_subject(self):
        assert decode_token(create_access_token({"role": "academy"})) is None


class TestRegistration:
    def _register(self, client: TestClient, **overrides):
        payload = {
            "display_name": "Green Valley Academy",
            "email": "green@example.com",
            "password": "password123",
            "confirm_password": "password123",
            "role": "academy",
        }
        payload.update(overrides)
        return client.post("/api/auth/register", json=payload)

    def test_register_academy(self, client: TestClient, db: Session):
        response = self._register(client)
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "academy"
        user = db.query(User).filter(User.email == "green@example.com").first()
        assert user is not None
        assert user.password_hash != "password123"

    def test_register_defaults_to_student(self, client: TestClient):
        payload = {
            "email": "kid@example.com",
            "password": "password123",
            "confirm_password": "password123",
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "student"

    def test_duplicate_email_conflicts(self, client: TestClient, academy_user: User):
        response = self._register(client, email="ACADEMY@example.com")
        assert response.status_code == 409

    def test_password_mismatch(self, client: TestClient):
        response = self._register(client, confirm_password="different123")
        assert response.status_code == 422

    def test_unknown_role_rejected(self, client: TestClient):
        response = self._register(client, role="admin")
        assert response.status_code == 422

    def test_register_returns_usable_token(self, client: TestClient):
        body = self._register(client).json()
        assert body["token_type"] == "bearer"

        response = client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert response.status_code == 200
        assert response.json()["email"] == "green@example.com"
        assert response.json()["id"] == body["user"]["id"]

    def test_registered_account_can_log_in(self, client: TestClient):
        self._register(client)
        response = client.post(
            "/api/auth/login",
            data={"username": "green@example.com", "password": "password123"},
        )
        assert response.status_code == 200
