from datetime import timedelta

import pytest

from src.domain.base import utcnow
from tests.fixtures.api_helpers import bearer, load_user, register


@pytest.mark.asyncio
async def test_reset_password_single_use(client, test_data, notification_sink):
    """Reset once with a token, then the same token is dead"""
    # Arrange
    payload = test_data.get_copy("student")
    await register(client, payload)

    # Act
    forgot = await client.post("/auth/forgot-password", json={"email": payload["email"]})
    token = notification_sink.last_token("reset-password")
    first = await client.put(f"/auth/reset-password/{token}", json={"password": "newpass1"})
    second = await client.put(f"/auth/reset-password/{token}", json={"password": "again1"})

    # Assert
    assert forgot.status_code == 200
    assert forgot.json()["message"] == "If the email exists, a password reset link has been sent"
    assert first.status_code == 200
    assert first.json()["token"]
    assert second.status_code == 400
    assert second.json()["code"] == "INVALID_TOKEN"

    old_login = await client.post(
        "/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )
    new_login = await client.post(
        "/auth/login", json={"email": payload["email"], "password": "newpass1"}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_forgot_password_unknown_email(client, notification_sink):
    response = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 200
    assert notification_sink.messages == []


@pytest.mark.asyncio
async def test_forgot_password_delivery_failure_is_indistinguishable(client, test_data, notification_sink, db_session):
    payload = test_data.get_copy("student")
    await register(client, payload)
    notification_sink.fail = True

    failed = await client.post("/auth/forgot-password", json={"email": payload["email"]})
    unknown = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})

    assert failed.status_code == unknown.status_code == 200
    assert failed.json() == unknown.json()
    user = await load_user(db_session, payload["email"])
    assert user.reset_password_token_hash is None
    assert user.reset_password_expires_at is None


@pytest.mark.asyncio
async def test_expired_reset_token(client, test_data, notification_sink, db_session):
    payload = test_data.get_copy("student")
    await register(client, payload)
    await client.post("/auth/forgot-password", json={"email": payload["email"]})
    token = notification_sink.last_token("reset-password")

    user = await load_user(db_session, payload["email"])
    user.reset_password_expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(user)
    await db_session.commit()

    response = await client.put(f"/auth/reset-password/{token}", json={"password": "newpass1"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired reset token"


@pytest.mark.asyncio
async def test_new_reset_request_replaces_old_token(client, test_data, notification_sink):
    payload = test_data.get_copy("student")
    await register(client, payload)
    await client.post("/auth/forgot-password", json={"email": payload["email"]})
    first_token = notification_sink.last_token("reset-password")
    await client.post("/auth/forgot-password", json={"email": payload["email"]})
    second_token = notification_sink.last_token("reset-password")

    stale = await client.put(f"/auth/reset-password/{first_token}", json={"password": "newpass1"})
    fresh = await client.put(f"/auth/reset-password/{second_token}", json={"password": "newpass1"})

    assert stale.status_code == 400
    assert fresh.status_code == 200


@pytest.mark.asyncio
async def test_password_change_invalidates_old_tokens(client, test_data):
    """Tokens from before a password change stop working; the new one works"""
    # Arrange
    payload = test_data.get_copy("student")
    old_token = (await register(client, payload))["token"]

    # Act
    changed = await client.put(
        "/auth/password",
        headers=bearer(old_token),
        json={"current_password": payload["password"], "new_password": "newpass1"},
    )
    new_token = changed.json()["token"]
    client.cookies.clear()

    # Assert
    assert changed.status_code == 200
    assert (await client.get("/auth/me", headers=bearer(old_token))).status_code == 401
    assert (await client.get("/auth/me", headers=bearer(new_token))).status_code == 200


@pytest.mark.asyncio
async def test_password_change_wrong_current(client, test_data):
    token = (await register(client, test_data.get_copy("student")))["token"]

    response = await client.put(
        "/auth/password",
        headers=bearer(token),
        json={"current_password": "nope123", "new_password": "newpass1"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Password is incorrect"


@pytest.mark.asyncio
async def test_reset_invalidates_existing_sessions(client, test_data, notification_sink):
    payload = test_data.get_copy("student")
    old_token = (await register(client, payload))["token"]
    await client.post("/auth/forgot-password", json={"email": payload["email"]})
    reset = await client.put(
        f"/auth/reset-password/{notification_sink.last_token('reset-password')}",
        json={"password": "newpass1"},
    )
    client.cookies.clear()

    assert (await client.get("/auth/me", headers=bearer(old_token))).status_code == 401
    assert (await client.get("/auth/me", headers=bearer(reset.json()["token"]))).status_code == 200
