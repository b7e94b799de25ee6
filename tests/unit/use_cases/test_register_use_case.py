import pytest
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.auth import RegisterCommand, RegisterUseCase
from src.domain.entities import UserRole


def build_use_case(mock_uow, password_hasher, token_codec, notification_sink):
    return RegisterUseCase(
        mock_uow,
        password_hasher,
        token_codec,
        notification_sink,
        frontend_url="http://frontend.test",
    )


@pytest.mark.asyncio
async def test_register_creates_unconfirmed_user_and_session(
    mock_uow, password_hasher, token_codec, notification_sink
):
    """Registration stores hashes only, emails the raw token and logs in"""
    # Arrange
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)
    command = RegisterCommand(
        username="alice", email="alice@example.com", password="secret1"
    )

    # Act
    result = await use_case.execute(command)

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.success is True
    assert response.confirmation_email_sent is True
    assert response.user.username == "alice"
    assert response.user.role == "student"

    created_user = mock_uow.users.create.call_args[0][0]
    assert created_user.email_confirmed is False
    assert created_user.password_hash != "secret1"
    assert password_hasher.verify_password("secret1", created_user.password_hash)

    # Emailed link carries the raw token; only its hash is stored
    to_email, subject, html = notification_sink.send.call_args[0]
    assert to_email == "alice@example.com"
    assert subject == "Confirm your email"
    raw_token = html.split("confirm-email?token=")[1].split('"')[0]
    assert created_user.confirm_email_token_hash == password_hasher.hash_token(raw_token)

    claims = token_codec.verify(response.token)
    assert claims.subject_id == created_user.id
    session = mock_uow.sessions.create.call_args[0][0]
    assert claims.session_id == session.id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_register_with_lecturer_role(
    mock_uow, password_hasher, token_codec, notification_sink
):
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)
    command = RegisterCommand(
        username="prof", email="prof@example.com", password="secret1", role=UserRole.lecturer
    )

    result = await use_case.execute(command)

    assert result.is_ok()
    assert result.value.user.role == "lecturer"


@pytest.mark.asyncio
async def test_register_duplicate_email(
    mock_uow, password_hasher, token_codec, notification_sink, make_user
):
    # Arrange
    mock_uow.users.get_by_email.return_value = make_user()
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)

    # Act
    result = await use_case.execute(
        RegisterCommand(username="other", email="alice@example.com", password="secret1")
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "DUPLICATE_EMAIL"
    mock_uow.users.create.assert_not_called()
    notification_sink.send.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_register_duplicate_username(
    mock_uow, password_hasher, token_codec, notification_sink, make_user
):
    mock_uow.users.get_by_username.return_value = make_user()
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)

    result = await use_case.execute(
        RegisterCommand(username="alice", email="new@example.com", password="secret1")
    )

    assert result.is_err()
    assert result.error.code == "DUPLICATE_USERNAME"
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_email_failure_still_creates_account_without_token(
    mock_uow, password_hasher, token_codec, notification_sink
):
    """A confirmation link nobody received must not stay consumable"""
    # Arrange
    notification_sink.send.return_value = False
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)

    # Act
    result = await use_case.execute(
        RegisterCommand(username="alice", email="alice@example.com", password="secret1")
    )

    # Assert
    assert result.is_ok()
    assert result.value.confirmation_email_sent is False
    created_user = mock_uow.users.create.call_args[0][0]
    assert created_user.confirm_email_token_hash is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "constraint, code",
    [
        ("UNIQUE constraint failed: users.email", "DUPLICATE_EMAIL"),
        ("UNIQUE constraint failed: users.username", "DUPLICATE_USERNAME"),
    ],
)
async def test_register_concurrent_duplicate_hits_unique_index(
    mock_uow, password_hasher, token_codec, notification_sink, constraint, code
):
    """Both lookups miss but the insert loses to a concurrent registration"""
    # Arrange
    mock_uow.users.create.side_effect = IntegrityError(
        "INSERT INTO users", {}, Exception(constraint)
    )
    use_case = build_use_case(mock_uow, password_hasher, token_codec, notification_sink)

    # Act
    result = await use_case.execute(
        RegisterCommand(username="alice", email="alice@example.com", password="secret1")
    )

    # Assert
    assert result.is_err()
    assert result.error.code == code
    notification_sink.send.assert_not_called()
    mock_uow.sessions.create.assert_not_called()
    mock_uow.commit.assert_not_called()
