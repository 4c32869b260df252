from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlmodel import SQLModel

from src.domain.entities import ContentSection


class IContentRepository(ABC):
    """Repository interface shared by every ordered content kind"""

    @abstractmethod
    async def list_active(self, filters: Optional[Dict[str, Any]] = None) -> List[SQLModel]:
        """List active items in display order, optionally filtered by column equality"""
        pass

    @abstractmethod
    async def get_by_id(self, item_id: UUID) -> Optional[SQLModel]:
        """Get item by ID"""
        pass

    @abstractmethod
    async def create(self, item: SQLModel) -> SQLModel:
        """Create a new item"""
        pass

    @abstractmethod
    async def update(self, item: SQLModel) -> SQLModel:
        """Update existing item"""
        pass

    @abstractmethod
    async def delete(self, item: SQLModel) -> None:
        """Delete an item"""
        pass

    @abstractmethod
    async def count(self, is_active: Optional[bool] = None) -> int:
        """Count items, optionally filtered by active flag"""
        pass


class IContentSectionRepository(ABC):
    """ContentSection repository interface - application layer"""

    @abstractmethod
    async def list_active(self) -> List[ContentSection]:
        """List active sections ordered by key"""
        pass

    @abstractmethod
    async def get_by_key(self, key: str) -> Optional[ContentSection]:
        """Get section by its unique key"""
        pass

    @abstractmethod
    async def save(self, section: ContentSection) -> ContentSection:
        """Insert or update a section"""
        pass

    @abstractmethod
    async def delete(self, section: ContentSection) -> None:
        """Delete a section"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all sections"""
        pass
