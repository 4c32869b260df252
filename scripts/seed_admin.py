"""
Seed the configured super admin into the database.

Run from the repository root:

    python -m scripts.seed_admin

Reads SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD and SEED_ADMIN_NAME from config.
Does nothing when a user with that email already exists.
"""

import asyncio
import logging

from config import ApplicationConfig
from src.adapter.database import Database
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.passwords import hash_password
from src.domain.entities import User, UserRole, normalize_email

logger = logging.getLogger("seed_admin")


async def seed_admin_user(database: Database) -> User:
    """Create the super admin if it doesn't exist."""
    email = normalize_email(ApplicationConfig.SEED_ADMIN_EMAIL)

    async with database.session() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            existing_user = await uow.users.get_by_email(email)
            if existing_user:
                logger.info("Admin user already exists: %s (%s)", email, existing_user.id)
                return existing_user

            admin_user = await uow.users.create(
                User(
                    email=email,
                    password_hash=hash_password(ApplicationConfig.SEED_ADMIN_PASSWORD),
                    name=ApplicationConfig.SEED_ADMIN_NAME,
                    role=UserRole.super_admin,
                    is_active=True,
                )
            )
            await uow.commit()

    logger.info("Admin user created: %s (%s)", email, admin_user.id)
    return admin_user


async def main():
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())
    database = Database(
        ApplicationConfig.DB_URI, connect_timeout=ApplicationConfig.DB_CONNECT_TIMEOUT
    )
    try:
        await database.init()
        await seed_admin_user(database)
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(main())
