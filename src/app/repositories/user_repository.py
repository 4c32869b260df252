from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import User


class DuplicateEmailError(Exception):
    """Raised by create/update when the email unique constraint is violated"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_many_by_ids(self, user_ids: List[UUID]) -> List[User]:
        """Get all users whose ID is in user_ids"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def list_paginated(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[User], int]:
        """
        List users newest first with optional filters.

        Returns:
            Tuple of (users on the requested page, total matching users)
        """
        pass

    @abstractmethod
    async def set_active_many(self, user_ids: List[UUID], is_active: bool) -> int:
        """Flip is_active for several users. Returns count of affected rows."""
        pass

    @abstractmethod
    async def count(self, is_active: Optional[bool] = None) -> int:
        """Count users, optionally filtered by active flag"""
        pass

    @abstractmethod
    async def count_by_role(self) -> Dict[str, int]:
        """Count users grouped by role"""
        pass
