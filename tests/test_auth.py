"""
Authentication endpoint and service tests
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from venue_admin.config import settings
from venue_admin.core.security import create_session_token
from venue_admin.schemas.auth import SessionUser
from venue_admin.services.auth_service import AuthService


class TestLogin:
    """Admin portal sign-in"""

    @pytest.mark.integration
    async def test_admin_login_success(self, client: AsyncClient, admin_user, identity):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "admin@venues.test", "password": "irrelevant"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 30 * 24 * 60 * 60
        assert data["user"]["id"] == str(admin_user.id)
        assert data["user"]["role"] == "admin"
        assert data["user"]["firebase_id"] == "firebase-admin-uid"

        claims = jwt.decode(data["access_token"], settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert claims["sub"] == str(admin_user.id)
        assert claims["email"] == "admin@venues.test"
        assert claims["name"] == "Admin User"
        assert claims["role"] == "admin"
        assert claims["type"] == "session"
        assert claims["exp"] - claims["iat"] == 30 * 24 * 60 * 60

    @pytest.mark.integration
    async def test_login_verifies_firebase_token_when_given(self, client: AsyncClient, admin_user, identity):
        response = await client.post(
            "/api/v1/auth/login",
            json={
                "email": "admin@venues.test",
                "password": "irrelevant",
                "firebaseToken": identity.VALID_TOKEN,
            }
        )
        assert response.status_code == 200
        assert identity.verified_tokens == [identity.VALID_TOKEN]

    @pytest.mark.integration
    async def test_bad_firebase_token_is_only_logged(self, client: AsyncClient, admin_user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "admin@venues.test", "password": "irrelevant", "firebaseToken": "forged"}
        )
        assert response.status_code == 200

    @pytest.mark.integration
    async def test_non_admin_gets_no_role_hint(self, client: AsyncClient, customer_user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "customer@venues.test", "password": "irrelevant"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.integration
    async def test_unknown_firebase_user(self, client: AsyncClient, admin_user, identity):
        identity.users.clear()
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "admin@venues.test", "password": "irrelevant"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.integration
    async def test_identity_provider_outage(self, client: AsyncClient, admin_user, identity):
        identity.lookup_error = RuntimeError("Failed to retrieve http://metadata.google.internal")
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "admin@venues.test", "password": "irrelevant"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.integration
    async def test_firebase_user_without_local_account(self, client: AsyncClient, identity):
        identity.users["stranger@venues.test"] = "firebase-stranger"
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "stranger@venues.test", "password": "irrelevant"}
        )
        assert response.status_code == 401

    @pytest.mark.integration
    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"email": "admin@venues.test"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"
        assert any(detail.startswith("password") for detail in response.json()["details"])


class TestSession:

    @pytest.mark.integration
    async def test_me_returns_claims(self, client: AsyncClient, admin_user, admin_headers):
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(admin_user.id)
        assert response.json()["role"] == "admin"

    @pytest.mark.integration
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    @pytest.mark.integration
    async def test_expired_token(self, client: AsyncClient, admin_user):
        token = create_session_token(
            SessionUser(id=str(admin_user.id), email=admin_user.email, name=admin_user.name, role="admin"),
            expires_delta=timedelta(seconds=-1)
        )
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json() == {"error": "Could not validate credentials"}

    @pytest.mark.integration
    async def test_token_signed_with_other_key(self, client: AsyncClient, admin_user):
        token = jwt.encode(
            {"sub": str(admin_user.id), "role": "admin", "type": "session"},
            "some-other-secret-key-of-sufficient-length",
            algorithm="HS256"
        )
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


@pytest.mark.unit
class TestAuthService:

    async def test_authenticate_returns_session(self, database, identity, admin_user):
        async with database.session() as db:
            session = await AuthService(db, identity).authenticate("admin@venues.test", "pw")
        assert session.id == str(admin_user.id)
        assert session.name == "Admin User"
        assert session.image is None

    async def test_authenticate_empty_email(self, database, identity):
        async with database.session() as db:
            assert await AuthService(db, identity).authenticate("", "pw") is None

    async def test_authenticate_rejects_venue_owner(self, database, identity, venue_owner):
        identity.users["owner@venues.test"] = "firebase-owner-uid"
        async with database.session() as db:
            assert await AuthService(db, identity).authenticate("owner@venues.test", "pw") is None
