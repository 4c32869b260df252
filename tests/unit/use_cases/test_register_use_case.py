from unittest.mock import AsyncMock

import pytest

from src.app.repositories.user_repository import DuplicateEmailError
from src.app.use_cases.auth import RegisterCommand, RegisterUseCase
from src.app.use_cases.users import CreateUserCommand, CreateUserUseCase
from src.domain.entities import UserRole


@pytest.fixture
def uow(mock_uow):
    mock_uow.users.get_by_email = AsyncMock(return_value=None)
    mock_uow.users.create = AsyncMock(side_effect=lambda user: user)
    return mock_uow


@pytest.mark.asyncio
async def test_register_normalizes_email(uow):
    result = await RegisterUseCase(uow).execute(
        RegisterCommand(email=" New@Union.org ", password="NewMember123!", name=" New ")
    )

    assert result.is_ok()
    assert result.value.email == "new@union.org"
    assert result.value.role == "user"
    uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_register_email_taken_by_concurrent_writer(uow):
    uow.users.create.side_effect = DuplicateEmailError("UNIQUE constraint failed: user.email")

    result = await RegisterUseCase(uow).execute(
        RegisterCommand(email="race@union.org", password="NewMember123!", name="Race")
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_email_taken_by_concurrent_writer(uow, make_user):
    admin = make_user(role=UserRole.admin, email="admin@union.org")
    uow.users.create.side_effect = DuplicateEmailError("UNIQUE constraint failed: user.email")

    result = await CreateUserUseCase(uow).execute(
        admin,
        CreateUserCommand(email="race@union.org", password="NewMember123!", name="Race"),
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    uow.commit.assert_not_called()
