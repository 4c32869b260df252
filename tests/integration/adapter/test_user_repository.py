import pytest

from src.adapter.repositories.user_repository import UserRepository
from src.app.repositories.user_repository import DuplicateEmailError
from src.domain.entities import User


@pytest.mark.asyncio
async def test_unique_email_violation_is_translated(database, users, test_data):
    """A writer that skipped the lookup still gets a typed duplicate error"""
    async with database.session() as session:
        repository = UserRepository(session)
        with pytest.raises(DuplicateEmailError):
            await repository.create(
                User(
                    email=test_data.user("member")["email"],
                    password_hash="x" * 60,
                    name="Duplicate",
                )
            )
        await session.rollback()
