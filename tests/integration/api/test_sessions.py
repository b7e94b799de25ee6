import pytest

from tests.fixtures.api_helpers import bearer, register


async def login(client, payload, user_agent):
    response = await client.post(
        "/auth/login",
        json={"email": payload["email"], "password": payload["password"]},
        headers={"User-Agent": user_agent},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.mark.asyncio
async def test_logout_revokes_token(client, test_data):
    """After logout the same token is rejected"""
    # Arrange
    token = (await register(client, test_data.get_copy("student")))["token"]

    # Act
    logout = await client.post("/auth/logout", headers=bearer(token))
    client.cookies.clear()
    after = await client.get("/auth/me", headers=bearer(token))

    # Assert
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully"
    assert after.status_code == 401
    assert after.json()["message"] == "Session has been revoked. Please log in again"


@pytest.mark.asyncio
async def test_list_and_revoke_sessions(client, test_data):
    # Arrange
    payload = test_data.get_copy("student")
    await register(client, payload)
    laptop = await login(client, payload, "laptop")
    phone = await login(client, payload, "phone")
    client.cookies.clear()

    # Act
    listed = await client.get("/sessions", headers=bearer(laptop))
    sessions = listed.json()["sessions"]
    phone_session = next(s for s in sessions if s["user_agent"] == "phone")
    revoked = await client.delete(f"/sessions/{phone_session['id']}", headers=bearer(laptop))

    # Assert
    assert listed.status_code == 200
    assert len(sessions) == 3
    assert [s["user_agent"] for s in sessions if s["current"]] == ["laptop"]
    assert revoked.status_code == 200
    assert (await client.get("/auth/me", headers=bearer(phone))).status_code == 401
    assert (await client.get("/auth/me", headers=bearer(laptop))).status_code == 200


@pytest.mark.asyncio
async def test_revoke_all_sessions(client, test_data):
    payload = test_data.get_copy("student")
    first = (await register(client, payload))["token"]
    second = await login(client, payload, "phone")
    client.cookies.clear()

    response = await client.post("/sessions/revoke-all", headers=bearer(first), json={})

    assert response.status_code == 200
    assert response.json()["revoked_count"] == 2
    assert (await client.get("/auth/me", headers=bearer(first))).status_code == 401
    assert (await client.get("/auth/me", headers=bearer(second))).status_code == 401


@pytest.mark.asyncio
async def test_cannot_revoke_other_users_session(client, test_data):
    alice = (await register(client, test_data.get_copy("student")))["token"]
    bob = (await register(client, test_data.get_copy("lecturer")))["token"]
    client.cookies.clear()
    bob_session = (await client.get("/sessions", headers=bearer(bob))).json()["sessions"][0]

    response = await client.delete(f"/sessions/{bob_session['id']}", headers=bearer(alice))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
    assert (await client.get("/auth/me", headers=bearer(bob))).status_code == 200


@pytest.mark.asyncio
async def test_tampered_token_rejected(client, test_data):
    token = (await register(client, test_data.get_copy("student")))["token"]
    client.cookies.clear()

    response = await client.get("/auth/me", headers=bearer(token[:-2] + "xx"))

    assert response.status_code == 401
