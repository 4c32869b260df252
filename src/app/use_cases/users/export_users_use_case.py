"""
Export Users Use Case

Public fields of a selection of principals, for CSV or JSON download.
"""

from typing import List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.result import Error, Result, Return
from .bulk_user_operation_use_case import MAX_BULK_SIZE

EXPORT_COLUMNS = (
    "id",
    "email",
    "name",
    "role",
    "is_active",
    "created_at",
    "last_login_at",
)


class ExportUsersUseCase:
    """
    Business Rules:
    - Same selection limits as bulk operations
    - Unknown ids are skipped
    - Only public fields leave the system (never password hashes)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_ids: List[UUID]) -> Result[List[UserProfile]]:
        user_ids = list(dict.fromkeys(user_ids))
        if not user_ids:
            return Return.err(Error("VALIDATION_ERROR", "At least one user id is required"))
        if len(user_ids) > MAX_BULK_SIZE:
            return Return.err(
                Error("VALIDATION_ERROR", f"At most {MAX_BULK_SIZE} users per export")
            )

        async with self.uow:
            users = await self.uow.users.get_many_by_ids(user_ids)

        order = {user_id: index for index, user_id in enumerate(user_ids)}
        users.sort(key=lambda user: order[user.id])
        return Return.ok([UserProfile.from_user(user) for user in users])
