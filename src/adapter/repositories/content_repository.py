from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Type
from uuid import UUID

from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.content_repository import (
    IContentRepository,
    IContentSectionRepository,
)
from src.domain.entities import ContentSection


class ContentRepository(IContentRepository):
    """Generic repository for ordered content tables (services, leaders, ...)"""

    def __init__(
        self,
        session: AsyncSession,
        model: Type[SQLModel],
        order_by: Optional[Sequence[Any]] = None,
    ):
        self.session = session
        self.model = model
        self.order_by = order_by or (model.display_order.asc(), model.created_at.desc())

    async def list_active(self, filters: Optional[Dict[str, Any]] = None) -> List[SQLModel]:
        stmt = select(self.model).where(self.model.is_active == True)
        for column, value in (filters or {}).items():
            stmt = stmt.where(getattr(self.model, column) == value)
        stmt = stmt.order_by(*self.order_by)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_id(self, item_id: UUID) -> Optional[SQLModel]:
        stmt = select(self.model).where(self.model.id == item_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, item: SQLModel) -> SQLModel:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def update(self, item: SQLModel) -> SQLModel:
        item.updated_at = datetime.utcnow()
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def delete(self, item: SQLModel) -> None:
        await self.session.delete(item)
        await self.session.flush()

    async def count(self, is_active: Optional[bool] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if is_active is not None:
            stmt = stmt.where(self.model.is_active == is_active)
        result = await self.session.exec(stmt)
        return result.one()


class ContentSectionRepository(IContentSectionRepository):
    """ContentSection repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_active(self) -> List[ContentSection]:
        stmt = (
            select(ContentSection)
            .where(ContentSection.is_active == True)
            .order_by(ContentSection.key)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_key(self, key: str) -> Optional[ContentSection]:
        stmt = select(ContentSection).where(ContentSection.key == key)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save(self, section: ContentSection) -> ContentSection:
        section.updated_at = datetime.utcnow()
        self.session.add(section)
        await self.session.flush()
        await self.session.refresh(section)
        return section

    async def delete(self, section: ContentSection) -> None:
        await self.session.delete(section)
        await self.session.flush()

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(ContentSection))
        return result.one()
