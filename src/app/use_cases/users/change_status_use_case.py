"""
Change User Status Use Cases

Activation, deactivation and soft deletion of principals.
"""

from datetime import datetime
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import User
from src.domain.result import Result, Return
from .dtos import UserChange
from .policies import CANNOT_MODIFY_SELF, USER_NOT_FOUND, check_can_manage


class ChangeStatusUseCase:
    """
    Business Rules:
    - A principal cannot change their own status
    - Only a super_admin may change a super_admin's status
    - Deactivation revokes all sessions of the target, so its refresh tokens stop
      working and the auth gate rejects its access tokens
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, user_id: UUID, is_active: bool) -> Result[UserChange]:
        if actor.id == user_id:
            return Return.err(CANNOT_MODIFY_SELF)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            denied = check_can_manage(actor, user)
            if denied:
                return Return.err(denied)

            was_active = user.is_active

            user.is_active = is_active
            user.updated_at = datetime.utcnow()
            user = await self.uow.users.update(user)

            if not is_active:
                await self.uow.sessions.revoke_all_by_user_id(user.id)

            await self.uow.commit()

        return Return.ok(
            UserChange(
                user=UserProfile.from_user(user),
                before={"is_active": was_active},
                after={"is_active": user.is_active},
            )
        )


class DeactivateUserUseCase:
    """
    Soft delete: principals are never removed, because audit events keep
    referencing them. Deleting means deactivating and revoking sessions.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, user_id: UUID) -> Result[UserChange]:
        result = await ChangeStatusUseCase(self.uow).execute(actor, user_id, is_active=False)
        if result.is_err():
            return result
        change = result.value
        return Return.ok(
            change.model_copy(update={"after": {"is_active": False, "deleted": True}})
        )
