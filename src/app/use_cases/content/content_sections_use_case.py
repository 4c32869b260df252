"""
Content Section Use Cases

Keyed page sections (e.g. ``home.hero``), upserted by key.
"""

import re
from typing import Any, Dict, List

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ContentSection
from src.domain.result import Error, Result, Return
from .dtos import ContentChange, snapshot

SECTION_KEY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]{0,99}$")
SECTION_NOT_FOUND = Error("CONTENT_SECTION_NOT_FOUND", "Content section not found")


class ListContentSectionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[List[Dict[str, Any]]]:
        async with self.uow:
            sections = await self.uow.sections.list_active()
        return Return.ok([snapshot(section) for section in sections])


class SaveContentSectionUseCase:
    """
    Upsert a section by key.

    Keys are lower-case and may contain digits, dots, dashes and underscores.
    Creating requires title and content; updating changes only supplied fields.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, key: str, data: Dict[str, Any]) -> Result[ContentChange]:
        key = key.strip().lower()
        if not SECTION_KEY_PATTERN.match(key):
            return Return.err(Error("VALIDATION_ERROR", f"Invalid content key: {key}"))

        async with self.uow:
            section = await self.uow.sections.get_by_key(key)
            created = section is None

            if created:
                if not data.get("title") or not data.get("content"):
                    return Return.err(
                        Error(
                            "VALIDATION_ERROR",
                            "title and content are required for a new section",
                        )
                    )
                before = None
                section = ContentSection(key=key, **data)
            else:
                before = snapshot(section)
                for field, value in data.items():
                    setattr(section, field, value)

            section = await self.uow.sections.save(section)
            await self.uow.commit()

        after = snapshot(section)
        return Return.ok(ContentChange(item=after, before=before, after=after, created=created))


class DeleteContentSectionUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, key: str) -> Result[ContentChange]:
        async with self.uow:
            section = await self.uow.sections.get_by_key(key.strip().lower())
            if section is None:
                return Return.err(SECTION_NOT_FOUND)

            before = snapshot(section)
            await self.uow.sections.delete(section)
            await self.uow.commit()

        return Return.ok(ContentChange(before=before))
