from datetime import timedelta

import pytest
from httpx import AsyncClient

from conftest import auth
from labsyncpro.security import create_access_token, token_user_id


@pytest.mark.asyncio
async def test_login_returns_token_and_user(client: AsyncClient, data):
    response = await client.post("/api/auth/login", json={"email": "instructor@example.com", "password": "password"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "instructor@example.com"
    assert body["user"]["role"] == "instructor"

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == str(data.instructor.id)


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client: AsyncClient, data):
    response = await client.post("/api/auth/login", json={"email": "instructor@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient, data):
    response = await client.get("/api/labs")
    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


@pytest.mark.asyncio
async def test_invalid_and_expired_tokens(client: AsyncClient, data):
    response = await client.get("/api/labs", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"

    expired = create_access_token({"sub": str(data.instructor.id)}, expires_delta=timedelta(minutes=-5))
    response = await client.get("/api/labs", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_deactivated_account(client: AsyncClient, session, data):
    data.instructor.is_active = False
    session.add(data.instructor)
    session.commit()

    response = await client.get("/api/labs", headers=auth(data.instructor))
    assert response.status_code == 401
    assert response.json()["error"] == "Account is deactivated"


@pytest.mark.asyncio
async def test_students_cannot_use_staff_routes(client: AsyncClient, data):
    response = await client.get("/api/labs", headers=auth(data.students[0]))
    assert response.status_code == 403
    assert response.json()["error"] == "Insufficient permissions"


def test_token_user_id_round_trip(data):
    token = create_access_token({"sub": str(data.students[0].id)})
    assert token_user_id(token) == data.students[0].id


@pytest.mark.parametrize("claims", [{}, {"sub": "42"}, {"sub": ""}])
def test_token_user_id_rejects_bad_subjects(claims):
    assert token_user_id(create_access_token(claims)) is None


def test_token_user_id_rejects_foreign_signature():
    assert token_user_id("a.b.c") is None


@pytest.mark.asyncio
async def test_non_uuid_subject_is_invalid(client: AsyncClient, data):
    token = create_access_token({"sub": "42"})
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_staff_flag(data):
    assert data.admin.is_staff
    assert data.instructor.is_staff
    assert not data.students[0].is_staff
