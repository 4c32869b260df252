"""
Register Use Case

Self-service registration of a regular member account.
"""

from src.app.repositories.user_repository import DuplicateEmailError
from src.app.services.passwords import hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User, UserRole, normalize_email
from src.domain.result import Error, Result, Return
from .dtos import RegisterCommand, UserProfile
from .password_policy import validate_password


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[UserProfile]

    Business Logic:
    1. Validate password strength
    2. Check that the normalized email is not taken
    3. Hash password with bcrypt
    4. Create an active user with role=user
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: RegisterCommand) -> Result[UserProfile]:
        password_check = validate_password(command.password)
        if password_check.is_err():
            return Return.err(password_check.error)

        email = normalize_email(command.email)

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )

            user = User(
                email=email,
                password_hash=hash_password(command.password),
                name=command.name.strip(),
                role=UserRole.user,
                is_active=True,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateEmailError:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )

            await self.uow.commit()

            return Return.ok(UserProfile.from_user(user))
