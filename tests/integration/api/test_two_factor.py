import pyotp
import pytest

from tests.fixtures.api_helpers import bearer, register


@pytest.mark.asyncio
async def test_two_factor_setup_and_login(client, test_data):
    """Enable 2FA, then a login needs the code before a token is issued"""
    # Arrange
    payload = test_data.get_copy("student")
    token = (await register(client, payload))["token"]

    # Act: setup
    generated = await client.post("/auth/2fa/generate", headers=bearer(token))
    secret = generated.json()["secret"]
    verified = await client.post(
        "/auth/2fa/verify", headers=bearer(token), json={"code": pyotp.TOTP(secret).now()}
    )

    # Assert: setup
    assert generated.status_code == 200
    assert generated.json()["otpauth_url"].startswith("otpauth://totp/")
    assert generated.json()["qr_code"]
    assert verified.status_code == 200
    assert verified.json()["two_factor_enabled"] is True

    # Act: login
    client.cookies.clear()
    login = await client.post(
        "/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )
    user_id = login.json()["user_id"]
    challenge = login.json()["challenge_token"]
    wrong = await client.post(
        "/auth/2fa/login", json={"challenge_token": challenge, "code": "000000"}
    )
    step_up = await client.post(
        "/auth/2fa/login",
        json={"challenge_token": challenge, "code": pyotp.TOTP(secret).now()},
    )

    # Assert: login
    assert login.status_code == 200
    assert login.json()["two_factor_required"] is True
    assert "token" not in login.json()
    assert wrong.status_code == 400
    assert wrong.json()["code"] == "INVALID_TOKEN"
    assert step_up.status_code == 200
    assert step_up.json()["user"]["id"] == user_id
    me = await client.get("/auth/me", headers=bearer(step_up.json()["token"]))
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_verify_without_setup(client, test_data):
    token = (await register(client, test_data.get_copy("student")))["token"]

    response = await client.post(
        "/auth/2fa/verify", headers=bearer(token), json={"code": "123456"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "TWO_FACTOR_NOT_SET_UP"


@pytest.mark.asyncio
async def test_disable_requires_code(client, test_data):
    payload = test_data.get_copy("student")
    token = (await register(client, payload))["token"]
    secret = (await client.post("/auth/2fa/generate", headers=bearer(token))).json()["secret"]
    await client.post(
        "/auth/2fa/verify", headers=bearer(token), json={"code": pyotp.TOTP(secret).now()}
    )

    refused = await client.post(
        "/auth/2fa/disable", headers=bearer(token), json={"code": "000000"}
    )
    disabled = await client.post(
        "/auth/2fa/disable", headers=bearer(token), json={"code": pyotp.TOTP(secret).now()}
    )
    login = await client.post(
        "/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )

    assert refused.status_code == 400
    assert disabled.status_code == 200
    assert disabled.json()["two_factor_enabled"] is False
    assert login.json()["token"]


@pytest.mark.asyncio
async def test_generate_requires_authentication(client):
    response = await client.post("/auth/2fa/generate")

    assert response.status_code == 401


async def _enable_two_factor(client, payload):
    body = await register(client, payload)
    token = body["token"]
    secret = (await client.post("/auth/2fa/generate", headers=bearer(token))).json()["secret"]
    await client.post(
        "/auth/2fa/verify", headers=bearer(token), json={"code": pyotp.TOTP(secret).now()}
    )
    client.cookies.clear()
    return body["user"]["id"], secret


@pytest.mark.asyncio
async def test_step_up_requires_password_challenge(client, test_data):
    """Knowing the user id and a current code is not enough to log in"""
    # Arrange
    user_id, secret = await _enable_two_factor(client, test_data.get_copy("student"))
    code = pyotp.TOTP(secret).now()

    # Act
    by_user_id = await client.post(
        "/auth/2fa/login", json={"user_id": user_id, "code": code}
    )
    forged = await client.post(
        "/auth/2fa/login", json={"challenge_token": "forged", "code": code}
    )

    # Assert
    assert by_user_id.status_code == 422
    assert forged.status_code == 401
    assert forged.json()["code"] == "UNAUTHENTICATED"
    assert "token" not in forged.json()
    assert "token" not in client.cookies


@pytest.mark.asyncio
async def test_session_token_is_not_a_challenge(client, test_data):
    payload = test_data.get_copy("student")
    token = (await register(client, payload))["token"]
    secret = (await client.post("/auth/2fa/generate", headers=bearer(token))).json()["secret"]
    await client.post(
        "/auth/2fa/verify", headers=bearer(token), json={"code": pyotp.TOTP(secret).now()}
    )

    response = await client.post(
        "/auth/2fa/login",
        json={"challenge_token": token, "code": pyotp.TOTP(secret).now()},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_step_up_attempts_are_limited(client, test_data):
    # Arrange
    payload = test_data.get_copy("student")
    _, secret = await _enable_two_factor(client, payload)
    credentials = {"email": payload["email"], "password": payload["password"]}
    challenge = (await client.post("/auth/login", json=credentials)).json()[
        "challenge_token"
    ]

    # Act
    wrong = [
        await client.post(
            "/auth/2fa/login", json={"challenge_token": challenge, "code": "000000"}
        )
        for _ in range(5)
    ]
    locked = await client.post(
        "/auth/2fa/login",
        json={"challenge_token": challenge, "code": pyotp.TOTP(secret).now()},
    )
    fresh = (await client.post("/auth/login", json=credentials)).json()["challenge_token"]
    unlocked = await client.post(
        "/auth/2fa/login",
        json={"challenge_token": fresh, "code": pyotp.TOTP(secret).now()},
    )

    # Assert
    assert [r.status_code for r in wrong] == [400] * 5
    assert locked.status_code == 401
    assert unlocked.status_code == 200
    assert unlocked.json()["token"]
