from datetime import timedelta
import uuid

import jwt
import pytest
from fastapi import status

from bookstore.core.config import settings
from bookstore.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from bookstore.core.security import Identity, create_access_token
from bookstore.repos.user_repo import UserRepository
from bookstore.schemas.auth import LoginRequest, RegisterRequest
from bookstore.services.auth_service import AuthService


class TestRegisterEndpoint:
    """Test POST /auth/register."""

    def test_register_success(self, test_client, user_credentials):
        response = test_client.post("/auth/register", json=user_credentials)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["email"] == user_credentials["email"]
        assert body["data"]["username"] == user_credentials["username"]
        assert "id" in body["data"]
        assert "created_at" in body["data"]
        assert "password" not in body["data"]

    def test_register_without_username(self, test_client):
        response = test_client.post(
            "/auth/register",
            json={"email": "nousername@example.com", "password": "longenough"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["username"] is None

    def test_register_missing_email(self, test_client):
        response = test_client.post("/auth/register", json={"password": "longenough"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Email and password are required"
        assert body["error"]["type"] == "validation_error"

    @pytest.mark.parametrize(
        "email",
        ["plainaddress", "no-at.example.com", "a@b", "a b@c.com", "reader@bad..com", "two@@example.com"],
    )
    def test_register_malformed_email(self, test_client, email):
        response = test_client.post(
            "/auth/register", json={"email": email, "password": "longenough"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid email format"

    def test_register_short_password(self, test_client):
        response = test_client.post(
            "/auth/register", json={"email": "short@example.com", "password": "1234567"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "at least 8 characters" in response.json()["message"]

    def test_register_duplicate_email(self, test_client, registered_user, user_credentials):
        response = test_client.post("/auth/register", json=user_credentials)

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Email already registered"
        assert body["error"]["type"] == "conflict"


class TestLoginEndpoint:
    """Test POST /auth/login."""

    def test_login_success(self, test_client, registered_user, user_credentials):
        response = test_client.post(
            "/auth/login",
            json={"email": user_credentials["email"], "password": user_credentials["password"]},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["user"]["id"] == registered_user["id"]
        assert data["user"]["email"] == user_credentials["email"]

        claims = jwt.decode(
            data["access_token"], settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
        assert claims["id"] == registered_user["id"]
        assert claims["email"] == user_credentials["email"]
        assert claims["username"] == user_credentials["username"]
        # default lifetime is seven days
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    def test_login_wrong_password_and_unknown_email_look_the_same(
        self, test_client, registered_user, user_credentials
    ):
        wrong_password = test_client.post(
            "/auth/login",
            json={"email": user_credentials["email"], "password": "not-the-password"},
        )
        unknown_email = test_client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": user_credentials["password"]},
        )

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.json()["message"] == unknown_email.json()["message"] == "Invalid credentials"

    def test_login_missing_fields(self, test_client):
        response = test_client.post("/auth/login", json={"email": "someone@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Email and password are required"


class TestMeEndpoint:
    """Test GET /auth/me."""

    def test_me_success(self, test_client, registered_user, auth_headers):
        response = test_client.get("/auth/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == registered_user["id"]
        assert data["email"] == registered_user["email"]
        assert "updated_at" in data
        assert "password" not in data

    def test_me_without_token(self, test_client):
        response = test_client.get("/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Authorization header with Bearer token required"

    def test_me_with_garbage_token(self, test_client):
        response = test_client.get("/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["type"] == "invalid_token"
        assert response.json()["message"] == "Invalid token"

    def test_me_with_expired_token(self, test_client, registered_user):
        identity = Identity(
            id=uuid.UUID(registered_user["id"]),
            email=registered_user["email"],
            username=registered_user["username"],
        )
        token = create_access_token(identity, expires_in=timedelta(seconds=-10))

        response = test_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["type"] == "token_expired"
        assert response.json()["message"] == "Token expired"

    def test_me_with_token_signed_by_another_secret(self, test_client, registered_user):
        token = jwt.encode(
            {"id": registered_user["id"], "email": registered_user["email"], "exp": 9999999999},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        response = test_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["type"] == "invalid_token"

    def test_me_for_user_that_no_longer_exists(self, test_client):
        token = create_access_token(Identity(id=uuid.uuid4(), email="ghost@example.com"))

        response = test_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "User not found"


class TestAuthService:
    """Test auth service layer directly."""

    def test_register_hashes_password(self, db_session):
        user = AuthService.register(
            db_session,
            RegisterRequest(email="hash@example.com", password="plaintext-pw"),
        )

        assert user.password != "plaintext-pw"
        assert user.password.startswith("$2")

    def test_register_duplicate_raises_conflict(self, db_session):
        data = RegisterRequest(email="twice@example.com", password="plaintext-pw")
        AuthService.register(db_session, data)

        with pytest.raises(ConflictError):
            AuthService.register(db_session, data)

    def test_register_validation(self, db_session):
        with pytest.raises(ValidationError, match="Invalid email format"):
            AuthService.register(db_session, RegisterRequest(email="bad", password="longenough"))

    def test_login_unknown_user(self, db_session):
        with pytest.raises(AuthError, match="Invalid credentials"):
            AuthService.login(db_session, LoginRequest(email="none@example.com", password="whatever1"))

    def test_login_then_verify_round_trip(self, db_session):
        user = AuthService.register(
            db_session,
            RegisterRequest(email="verify@example.com", password="plaintext-pw", username="ver"),
        )
        result = AuthService.login(
            db_session, LoginRequest(email="verify@example.com", password="plaintext-pw")
        )

        identity = AuthService.verify(result.access_token)
        assert identity == Identity(id=user.id, email="verify@example.com", username="ver")

    def test_get_profile_missing_user(self, db_session):
        with pytest.raises(NotFoundError):
            AuthService.get_profile(db_session, Identity(id=uuid.uuid4(), email="x@example.com"))

    def test_register_rejects_consecutive_dots_in_domain(self, db_session):
        with pytest.raises(ValidationError, match="Invalid email format"):
            AuthService.register(
                db_session, RegisterRequest(email="reader@bad..com", password="longenough1")
            )

        assert UserRepository.get_by_email(db_session, "reader@bad..com") is None
