from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import DuplicateEmailError, IUserRepository
from src.domain.entities import User, normalize_email


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush_user(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # concurrent writer took the email between the lookup and the flush
            raise DuplicateEmailError(str(exc.orig)) from exc

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        stmt = select(User).where(User.email == normalize_email(email))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_many_by_ids(self, user_ids: List[UUID]) -> List[User]:
        """Get all users whose ID is in user_ids"""
        if not user_ids:
            return []
        stmt = select(User).where(User.id.in_(user_ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self._flush_user()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self._flush_user()
        await self.session.refresh(user)
        return user

    async def list_paginated(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[User], int]:
        conditions = []
        if role:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)
        if search:
            pattern = f"%{search.strip().lower()}%"
            conditions.append(
                or_(User.email.like(pattern), func.lower(User.name).like(pattern))
            )

        count_stmt = select(func.count()).select_from(User).where(*conditions)
        total = (await self.session.exec(count_stmt)).one()

        stmt = (
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def set_active_many(self, user_ids: List[UUID], is_active: bool) -> int:
        """Flip is_active for several users"""
        if not user_ids:
            return 0
        stmt = (
            update(User)
            .where(User.id.in_(user_ids))
            .values(is_active=is_active)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count(self, is_active: Optional[bool] = None) -> int:
        stmt = select(func.count()).select_from(User)
        if is_active is not None:
            stmt = stmt.where(User.is_active == is_active)
        result = await self.session.exec(stmt)
        return result.one()

    async def count_by_role(self) -> Dict[str, int]:
        stmt = select(User.role, func.count()).group_by(User.role)
        result = await self.session.exec(stmt)
        return {
            (role.value if hasattr(role, "value") else role): count
            for role, count in result.all()
        }
