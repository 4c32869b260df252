"""
Database

Owns the async engine and session factory for the process. Constructed once
by the composition root (create_app or a script), initialised at startup and
closed at shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  registers all tables on SQLModel.metadata

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, uri: str, connect_timeout: float = 2, echo: bool = False):
        self.uri = uri
        # connect timeout keeps an unreachable database from hanging requests
        self.engine = create_async_engine(
            uri,
            echo=echo,
            future=True,
            pool_pre_ping=True,
            connect_args={"timeout": connect_timeout},
        )
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    async def init(self) -> None:
        """Create missing tables"""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema ready")

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Database ping failed: %s", exc)
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session
