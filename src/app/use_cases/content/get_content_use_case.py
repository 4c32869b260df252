"""
Get Content Use Cases

Public reads of the site content tables.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Result, Return
from .dtos import snapshot
from .kinds import ContentKind


class ListContentUseCase:
    """Active items of one content kind in display order"""

    def __init__(self, uow: UnitOfWork, kind: ContentKind):
        self.uow = uow
        self.kind = kind

    async def execute(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> Result[List[Dict[str, Any]]]:
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        async with self.uow:
            items = await self.uow.content(self.kind.name).list_active(filters)
        return Return.ok([snapshot(item) for item in items])


class GetContentUseCase:
    def __init__(self, uow: UnitOfWork, kind: ContentKind):
        self.uow = uow
        self.kind = kind

    async def execute(self, item_id: UUID) -> Result[Dict[str, Any]]:
        async with self.uow:
            item = await self.uow.content(self.kind.name).get_by_id(item_id)
        if item is None:
            return Return.err(self.kind.not_found)
        return Return.ok(snapshot(item))
