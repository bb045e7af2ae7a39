"""
End-to-end tests for the authentication flow.

This test suite verifies:
1. Signup creates an account and returns a usable token
2. Emails are unique case-insensitively
3. Login with correct / wrong credentials
4. /auth/me with and without a token
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import app
from services.account_service import AccountService, get_account_service
from tests.fixtures import InMemoryLedgerRepository

TEST_JWT_SECRET = "test-secret-for-auth-flow-tests-0123456789"


@pytest.fixture
def repository() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
async def client(repository, monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", TEST_JWT_SECRET)
    app.dependency_overrides[get_account_service] = lambda: AccountService(repository)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _signup(client: AsyncClient, email: str = "Ada@Example.com", password: str = "s3cret-pass"):
    return await client.post(
        "/api/v1/auth/signup",
        json={"name": "Ada", "email": email, "password": password},
    )


async def test_new_user_signup_flow(client: AsyncClient, repository):
    resp = await _signup(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["email"] == "ada@example.com"
    assert "password_hash" not in body["user"]
    assert body["token"]

    stored = repository.users[body["user"]["id"]]
    assert stored.password_hash != "s3cret-pass"
    assert stored.points == 0

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["name"] == "Ada"


async def test_signup_duplicate_email_is_conflict(client: AsyncClient):
    assert (await _signup(client)).status_code == 201

    resp = await _signup(client, email="ADA@example.com")
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Email already in use"


async def test_signup_missing_fields(client: AsyncClient):
    resp = await client.post("/api/v1/auth/signup", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required fields: name, password"


async def test_existing_user_login_flow(client: AsyncClient):
    await _signup(client)

    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "ada@EXAMPLE.com", "password": "s3cret-pass"},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Login successful"

    token = resp.json()["token"]
    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "ada@example.com"


@pytest.mark.parametrize("email,password", [
    ("ada@example.com", "wrong-pass"),
    ("nobody@example.com", "s3cret-pass"),
])
async def test_login_invalid_credentials(client: AsyncClient, email, password):
    await _signup(client)

    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


async def test_authentication_required_endpoints(client: AsyncClient):
    assert (await client.get("/api/v1/auth/me")).status_code == 401
    assert (await client.get("/api/v1/rewards")).status_code == 401
    assert (await client.post("/api/v1/activities", json={"type": "Walking", "quantity": 1})).status_code == 401


async def test_logout_is_stateless(client: AsyncClient):
    resp = await client.post("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful."}
