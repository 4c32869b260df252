"""
User Entity

Represents an authenticated principal (site staff or registered member).
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class User(SQLModel, table=True):
    """
    User entity - a principal that can authenticate against the portal.

    Business Rules:
    - Email is unique across all users and stored lower-cased
    - Password stored as bcrypt hash, never in plaintext
    - Inactive users are rejected by the auth gate even with a valid token
    - Never hard-deleted: deactivation keeps audit references intact
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    name: str = Field(max_length=255)

    role: UserRole = Field(default=UserRole.user)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_role", "role"),
        Index("idx_user_is_active", "is_active"),
    )

    @property
    def role_name(self) -> str:
        return self.role.value if isinstance(self.role, UserRole) else self.role

    def to_public_dict(self) -> Dict[str, Any]:
        """Snapshot without secret fields, used for responses and audit diffs."""
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "role": self.role_name,
            "is_active": self.is_active,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
