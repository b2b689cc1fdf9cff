from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.use_cases.auth.dtos import SigninCommand
from src.app.use_cases.auth.signin_use_case import SigninUseCase
from src.domain.entities import User


@pytest.fixture
def registered_user(password_hasher):
    return User(
        id="user-1",
        email="user@acme.io",
        hashed_password=password_hasher.hash("SecurePass123"),
        email_verified=True,
    )


@pytest.mark.asyncio
async def test_successful_signin(mock_uow, mock_session_manager, password_hasher, registered_user):
    """Correct password issues a session"""
    # Arrange
    mock_uow.users.get_by_email.return_value = registered_user
    use_case = SigninUseCase(mock_uow, mock_session_manager, password_hasher)

    # Act
    result = await use_case.execute(
        SigninCommand(email="user@acme.io", password="SecurePass123")
    )

    # Assert
    assert result.is_ok()
    assert result.value.user.id == "user-1"
    assert result.value.session_id == "session-user-1"
    assert result.value.cookie.value == "session-user-1"
    mock_session_manager.create_session.assert_called_once_with("user-1")


@pytest.mark.asyncio
async def test_signin_wrong_password(mock_uow, mock_session_manager, password_hasher, registered_user):
    # Arrange
    mock_uow.users.get_by_email.return_value = registered_user
    use_case = SigninUseCase(mock_uow, mock_session_manager, password_hasher)

    # Act
    result = await use_case.execute(SigninCommand(email="user@acme.io", password="WrongPass123"))

    # Assert
    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_session_manager.create_session.assert_not_called()


@pytest.mark.asyncio
async def test_signin_unknown_email_runs_kdf(mock_uow, mock_session_manager):
    """Unknown email still pays for one verify so timing does not leak"""
    # Arrange
    hasher = MagicMock()
    hasher.hash.return_value = "dummy-hash"
    hasher.verify.return_value = False
    use_case = SigninUseCase(mock_uow, mock_session_manager, hasher)

    # Act
    result = await use_case.execute(SigninCommand(email="ghost@acme.io", password="SecurePass123"))

    # Assert
    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    hasher.verify.assert_called_once_with("dummy-hash", "SecurePass123")


@pytest.mark.asyncio
async def test_signin_account_without_password(mock_uow, mock_session_manager, password_hasher):
    """Accounts created through an OAuth provider cannot sign in with a password"""
    # Arrange
    mock_uow.users.get_by_email.return_value = User(
        id="user-2", email="oauth@acme.io", hashed_password=None
    )
    use_case = SigninUseCase(mock_uow, mock_session_manager, password_hasher)

    # Act
    result = await use_case.execute(SigninCommand(email="oauth@acme.io", password="SecurePass123"))

    # Assert
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_signin_same_error_for_unknown_and_wrong(
    mock_uow, mock_session_manager, password_hasher, registered_user
):
    use_case = SigninUseCase(mock_uow, mock_session_manager, password_hasher)

    unknown = await use_case.execute(SigninCommand(email="ghost@acme.io", password="SecurePass123"))
    mock_uow.users.get_by_email.return_value = registered_user
    wrong = await use_case.execute(SigninCommand(email="user@acme.io", password="WrongPass123"))

    assert unknown.error.code == wrong.error.code
    assert unknown.error.message == wrong.error.message


@pytest.mark.asyncio
async def test_signin_validation(mock_uow, mock_session_manager, password_hasher):
    # Arrange
    mock_uow.users.get_by_email = AsyncMock()
    use_case = SigninUseCase(mock_uow, mock_session_manager, password_hasher)

    # Act
    result = await use_case.execute(SigninCommand(email="nope", password="short"))

    # Assert
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.get_by_email.assert_not_called()
