"""
Content Use Case DTOs
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel


def snapshot(item: SQLModel) -> Dict[str, Any]:
    """JSON-safe copy of a content row for responses and audit diffs"""
    return item.model_dump(mode="json")


class ContentChange(BaseModel):
    """Outcome of a content mutation with before/after snapshots"""

    item: Optional[Dict[str, Any]] = None
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    created: bool = False

    @property
    def changes(self) -> Dict[str, Any]:
        return {"before": self.before, "after": self.after}
