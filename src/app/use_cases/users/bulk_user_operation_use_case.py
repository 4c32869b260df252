"""
Bulk User Operation Use Case

Activates, deactivates or soft-deletes several principals at once.
"""

from typing import List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from src.domain.result import Error, Result, Return
from .dtos import BulkOperationResult
from .policies import SUPER_ADMIN_REQUIRED, is_super_admin

BULK_ACTIONS = ("activate", "deactivate", "delete")
MAX_BULK_SIZE = 100


class BulkUserOperationUseCase:
    """
    Business Rules:
    - action is "activate", "deactivate" or "delete"
    - "delete" is a soft delete: the same as "deactivate", recorded as a delete
    - The actor's own id must not be in the list
    - A non-super_admin cannot touch super_admin accounts
    - Unknown ids are ignored; the result reports how many rows changed
    - Deactivation revokes all sessions of the affected principals
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, action: str, user_ids: List[UUID]
    ) -> Result[BulkOperationResult]:
        if action not in BULK_ACTIONS:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Invalid bulk action: {action}. Must be one of: {', '.join(BULK_ACTIONS)}",
                )
            )

        user_ids = list(dict.fromkeys(user_ids))
        if not user_ids:
            return Return.err(Error("VALIDATION_ERROR", "At least one user id is required"))
        if len(user_ids) > MAX_BULK_SIZE:
            return Return.err(
                Error("VALIDATION_ERROR", f"At most {MAX_BULK_SIZE} users per bulk operation")
            )

        if actor.id in user_ids:
            return Return.err(
                Error("CANNOT_MODIFY_SELF", "You cannot include yourself in a bulk operation")
            )

        is_active = action == "activate"

        async with self.uow:
            users = await self.uow.users.get_many_by_ids(user_ids)

            if not is_super_admin(actor) and any(is_super_admin(user) for user in users):
                return Return.err(SUPER_ADMIN_REQUIRED)

            found_ids = [user.id for user in users]
            affected = await self.uow.users.set_active_many(found_ids, is_active)

            revoked = 0
            if not is_active:
                revoked = await self.uow.sessions.revoke_all_by_user_ids(found_ids)

            await self.uow.commit()

        return Return.ok(
            BulkOperationResult(
                action=action,
                requested=len(user_ids),
                affected=affected,
                sessions_revoked=revoked,
            )
        )
