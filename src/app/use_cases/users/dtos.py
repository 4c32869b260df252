"""
User Management Use Case DTOs
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.app.use_cases.auth.dtos import UserProfile


class CreateUserCommand(BaseModel):
    email: str
    password: str
    name: str
    role: str = "user"
    is_active: bool = True


class UserChange(BaseModel):
    """Outcome of a user mutation with before/after snapshots for the audit trail"""

    user: UserProfile
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None

    @property
    def changes(self) -> Dict[str, Any]:
        return {"before": self.before, "after": self.after}


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserList(BaseModel):
    users: List[UserProfile]
    pagination: Pagination


class UserDetail(BaseModel):
    user: UserProfile
    recent_activity: List[Dict[str, Any]]


class BulkOperationResult(BaseModel):
    action: str
    requested: int
    affected: int
    sessions_revoked: int = 0
