"""
Content Use Cases

Public site content: services, leaders, updates, achievements and keyed sections.
"""

from .kinds import CONTENT_KINDS, ContentKind, SERVICES, LEADERS, UPDATES, ACHIEVEMENTS
from .dtos import ContentChange, snapshot
from .get_content_use_case import ListContentUseCase, GetContentUseCase
from .manage_content_use_case import (
    CreateContentUseCase,
    UpdateContentUseCase,
    DeleteContentUseCase,
)
from .content_sections_use_case import (
    ListContentSectionsUseCase,
    SaveContentSectionUseCase,
    DeleteContentSectionUseCase,
)

__all__ = [
    "CONTENT_KINDS",
    "ContentKind",
    "SERVICES",
    "LEADERS",
    "UPDATES",
    "ACHIEVEMENTS",
    "ContentChange",
    "snapshot",
    "ListContentUseCase",
    "GetContentUseCase",
    "CreateContentUseCase",
    "UpdateContentUseCase",
    "DeleteContentUseCase",
    "ListContentSectionsUseCase",
    "SaveContentSectionUseCase",
    "DeleteContentSectionUseCase",
]
