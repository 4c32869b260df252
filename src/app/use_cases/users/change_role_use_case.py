"""
Change User Role Use Case
"""

from datetime import datetime
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import User
from src.domain.result import Result, Return
from .dtos import UserChange
from .policies import (
    CANNOT_MODIFY_SELF,
    USER_NOT_FOUND,
    check_can_assign,
    check_can_manage,
    parse_role,
)


class ChangeRoleUseCase:
    """
    Use case for changing a principal's role.

    Business Rules:
    - A principal cannot change their own role
    - Role must be one of the known roles
    - Only a super_admin may promote to or demote from super_admin
    - Existing access tokens keep their role claim until expiry; the auth gate
      re-loads the principal so role checks see the new role immediately
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, user_id: UUID, new_role: str) -> Result[UserChange]:
        """
        Execute change role use case.

        Args:
            actor: Principal making the change
            user_id: Principal whose role is being changed
            new_role: Role to assign (super_admin/admin/moderator/user)

        Returns:
            Result with the updated user and before/after snapshots, or Error
        """
        if actor.id == user_id:
            return Return.err(CANNOT_MODIFY_SELF)

        parsed = parse_role(new_role)
        if parsed.is_err():
            return Return.err(parsed.error)
        role = parsed.value

        denied = check_can_assign(actor, role)
        if denied:
            return Return.err(denied)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            denied = check_can_manage(actor, user)
            if denied:
                return Return.err(denied)

            before = user.to_public_dict()

            user.role = role
            user.updated_at = datetime.utcnow()
            user = await self.uow.users.update(user)

            await self.uow.commit()

        return Return.ok(
            UserChange(
                user=UserProfile.from_user(user),
                before={"role": before["role"]},
                after={"role": user.role_name},
            )
        )
