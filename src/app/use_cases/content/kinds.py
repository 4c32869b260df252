"""Registry of the public content types managed through the admin API."""

from dataclasses import dataclass
from typing import Dict, Type

from sqlmodel import SQLModel

from src.domain.entities import Achievement, Leader, Service, Update
from src.domain.result import Error


@dataclass(frozen=True)
class ContentKind:
    name: str  # unit of work attribute and URL segment
    resource: str  # audit resource name
    label: str
    model: Type[SQLModel]

    @property
    def not_found(self) -> Error:
        return Error(f"{self.resource.upper()}_NOT_FOUND", f"{self.label} not found")


SERVICES = ContentKind("services", "service", "Service", Service)
LEADERS = ContentKind("leaders", "leader", "Leader", Leader)
UPDATES = ContentKind("updates", "update", "Update", Update)
ACHIEVEMENTS = ContentKind("achievements", "achievement", "Achievement", Achievement)

CONTENT_KINDS: Dict[str, ContentKind] = {
    kind.name: kind for kind in (SERVICES, LEADERS, UPDATES, ACHIEVEMENTS)
}
