"""
List Users Use Case
"""

import math
from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.result import Result, Return
from .dtos import Pagination, UserList
from .policies import parse_role

MAX_PAGE_SIZE = 100


class ListUsersUseCase:
    """
    Page through principals, newest first.

    Filters: search (email or name substring), role, is_active.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Result[UserList]:
        role_filter = None
        if role:
            parsed = parse_role(role)
            if parsed.is_err():
                return Return.err(parsed.error)
            role_filter = parsed.value

        page = max(page, 1)
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        async with self.uow:
            users, total = await self.uow.users.list_paginated(
                page=page,
                limit=limit,
                search=search,
                role=role_filter,
                is_active=is_active,
            )

        return Return.ok(
            UserList(
                users=[UserProfile.from_user(user) for user in users],
                pagination=Pagination(
                    page=page,
                    limit=limit,
                    total=total,
                    pages=math.ceil(total / limit) if total else 0,
                ),
            )
        )
