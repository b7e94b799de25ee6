import pytest

from src.app.use_cases.auth import (
    AuthResponse,
    ClientInfo,
    LoginUseCase,
    TwoFactorRequiredResponse,
)


@pytest.mark.asyncio
async def test_successful_login(mock_uow, password_hasher, token_codec, make_user):
    """Correct credentials open a session and return a token bound to it"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_email.return_value = user
    use_case = LoginUseCase(mock_uow, password_hasher, token_codec)

    # Act
    result = await use_case.execute(
        "alice@example.com", "secret1", ClientInfo(user_agent="pytest", ip_address="127.0.0.1")
    )

    # Assert
    assert result.is_ok()
    response = result.value
    assert isinstance(response, AuthResponse)
    assert response.user.email == "alice@example.com"

    session = mock_uow.sessions.create.call_args[0][0]
    assert session.user_id == user.id
    assert session.user_agent == "pytest"
    assert session.ip_address == "127.0.0.1"

    claims = token_codec.verify(response.token)
    assert claims.subject_id == user.id
    assert claims.session_id == session.id

    assert user.last_login_at is not None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_wrong_password(mock_uow, password_hasher, token_codec, make_user):
    mock_uow.users.get_by_email.return_value = make_user()
    use_case = LoginUseCase(mock_uow, password_hasher, token_codec)

    result = await use_case.execute("alice@example.com", "wrong-password1")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.message == "Invalid credentials"
    mock_uow.sessions.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_login_unknown_email_is_indistinguishable(
    mock_uow, password_hasher, token_codec
):
    """Unknown email yields the same error as a wrong password"""
    mock_uow.users.get_by_email.return_value = None
    use_case = LoginUseCase(mock_uow, password_hasher, token_codec)

    result = await use_case.execute("nobody@example.com", "secret1")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_with_two_factor_requires_code(
    mock_uow, password_hasher, token_codec, make_user
):
    # Arrange
    user = make_user(
        two_factor_enabled=True,
        two_factor_secret="JBSWY3DPEHPK3PXP",
        two_factor_failed_attempts=3,
    )
    mock_uow.users.get_by_email.return_value = user
    use_case = LoginUseCase(mock_uow, password_hasher, token_codec)

    # Act
    result = await use_case.execute("alice@example.com", "secret1")

    # Assert
    assert result.is_ok()
    assert isinstance(result.value, TwoFactorRequiredResponse)
    assert result.value.user_id == str(user.id)
    claims = token_codec.verify_challenge(result.value.challenge_token, "2fa")
    assert claims.subject_id == user.id
    assert token_codec.verify(result.value.challenge_token) is None
    assert user.two_factor_failed_attempts == 0
    mock_uow.sessions.create.assert_not_called()
