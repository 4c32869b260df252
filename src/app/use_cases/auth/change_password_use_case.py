"""
Change Password Use Case

Lets an authenticated principal replace their password.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.passwords import hash_password, verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Error, Result, Return
from .dtos import ChangePasswordResponse
from .password_policy import validate_password


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current password must verify against the stored hash
    - New password must meet the password policy and differ from the current one
    - Every other session of the user is revoked; the calling session survives
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        session_id: Optional[UUID] = None,
    ) -> Result[ChangePasswordResponse]:
        password_check = validate_password(new_password)
        if password_check.is_err():
            return Return.err(password_check.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not verify_password(current_password, user.password_hash):
                return Return.err(
                    Error("INVALID_CURRENT_PASSWORD", "Current password is incorrect")
                )

            if current_password == new_password:
                return Return.err(
                    Error(
                        "INVALID_PASSWORD",
                        "New password must be different from the current password",
                    )
                )

            user.password_hash = hash_password(new_password)
            user.updated_at = datetime.utcnow()
            await self.uow.users.update(user)

            if session_id is not None:
                revoked = await self.uow.sessions.revoke_all_except_session(user.id, session_id)
            else:
                revoked = await self.uow.sessions.revoke_all_by_user_id(user.id)

            await self.uow.commit()

            return Return.ok(
                ChangePasswordResponse(
                    message="Password changed successfully",
                    sessions_revoked=revoked,
                )
            )
