"""
Content Entities

Public site content managed by staff: services, leaders, updates,
achievements and keyed content sections.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, Text

from .enums import UpdateType


class ContentBase(SQLModel):
    """Shared columns for ordered, toggleable content items"""

    is_active: bool = Field(default=True, index=True)
    display_order: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_type=DateTime
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_type=DateTime
    )


class Service(ContentBase, table=True):
    __tablename__ = "services"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=255)
    description: str = Field(sa_column=Column(Text, nullable=False))
    icon: Optional[str] = Field(default=None, max_length=255)


class Leader(ContentBase, table=True):
    __tablename__ = "leaders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    position: str = Field(max_length=255)
    bio: Optional[str] = Field(default=None, sa_column=Column(Text))
    image: Optional[str] = Field(default=None, max_length=1024)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=64)


class Update(ContentBase, table=True):
    """News item, job posting or announcement"""

    __tablename__ = "updates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))
    type: UpdateType = Field(default=UpdateType.news)
    is_featured: bool = Field(default=False)
    publish_date: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )


class Achievement(ContentBase, table=True):
    __tablename__ = "achievements"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=255)
    description: str = Field(sa_column=Column(Text, nullable=False))
    date: datetime = Field(sa_column=Column(DateTime, nullable=False))
    image: Optional[str] = Field(default=None, max_length=1024)


class ContentSection(SQLModel, table=True):
    """Free-form page section addressed by a unique key (e.g. ``home.hero``)"""

    __tablename__ = "content_sections"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(unique=True, index=True, max_length=100)
    title: str = Field(max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
