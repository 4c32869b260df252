"""
Manage Content Use Cases

Create, update and delete content items. Authorization is enforced by the
caller; these use cases only apply the change and describe it.
"""

from typing import Any, Dict
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Result, Return
from .dtos import ContentChange, snapshot
from .kinds import ContentKind


class CreateContentUseCase:
    def __init__(self, uow: UnitOfWork, kind: ContentKind):
        self.uow = uow
        self.kind = kind

    async def execute(self, data: Dict[str, Any]) -> Result[ContentChange]:
        async with self.uow:
            item = await self.uow.content(self.kind.name).create(self.kind.model(**data))
            await self.uow.commit()

        after = snapshot(item)
        return Return.ok(ContentChange(item=after, after=after, created=True))


class UpdateContentUseCase:
    """Partial update; only the supplied fields change"""

    def __init__(self, uow: UnitOfWork, kind: ContentKind):
        self.uow = uow
        self.kind = kind

    async def execute(self, item_id: UUID, data: Dict[str, Any]) -> Result[ContentChange]:
        async with self.uow:
            repository = self.uow.content(self.kind.name)
            item = await repository.get_by_id(item_id)
            if item is None:
                return Return.err(self.kind.not_found)

            before = snapshot(item)
            for field, value in data.items():
                setattr(item, field, value)
            item = await repository.update(item)

            await self.uow.commit()

        after = snapshot(item)
        return Return.ok(ContentChange(item=after, before=before, after=after))


class DeleteContentUseCase:
    def __init__(self, uow: UnitOfWork, kind: ContentKind):
        self.uow = uow
        self.kind = kind

    async def execute(self, item_id: UUID) -> Result[ContentChange]:
        async with self.uow:
            repository = self.uow.content(self.kind.name)
            item = await repository.get_by_id(item_id)
            if item is None:
                return Return.err(self.kind.not_found)

            before = snapshot(item)
            await repository.delete(item)

            await self.uow.commit()

        return Return.ok(ContentChange(before=before))
