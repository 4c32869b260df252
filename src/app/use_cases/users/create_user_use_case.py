"""
Create User Use Case

Administrator-driven account creation.
"""

from src.app.repositories.user_repository import DuplicateEmailError
from src.app.services.passwords import hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.app.use_cases.auth.password_policy import validate_password
from src.domain.entities import User, normalize_email
from src.domain.result import Error, Result, Return
from .dtos import CreateUserCommand, UserChange
from .policies import check_can_assign, parse_role


class CreateUserUseCase:
    """
    Business Rules:
    - Email must be unused (case-insensitive)
    - Only a super_admin may create another super_admin
    - Password must meet the password policy
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, command: CreateUserCommand) -> Result[UserChange]:
        parsed = parse_role(command.role)
        if parsed.is_err():
            return Return.err(parsed.error)
        role = parsed.value

        denied = check_can_assign(actor, role)
        if denied:
            return Return.err(denied)

        password_check = validate_password(command.password)
        if password_check.is_err():
            return Return.err(password_check.error)

        email = normalize_email(command.email)

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )

            try:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        password_hash=hash_password(command.password),
                        name=command.name.strip(),
                        role=role,
                        is_active=command.is_active,
                    )
                )
            except DuplicateEmailError:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )
            await self.uow.commit()

        return Return.ok(
            UserChange(user=UserProfile.from_user(user), after=user.to_public_dict())
        )
