from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.content_repository import (
    ContentRepository,
    ContentSectionRepository,
)
from src.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Achievement, Leader, Service, Update


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        self.services = ContentRepository(self.session, Service)
        self.leaders = ContentRepository(self.session, Leader)
        self.updates = ContentRepository(
            self.session, Update, order_by=(Update.publish_date.desc(),)
        )
        self.achievements = ContentRepository(self.session, Achievement)
        self.sections = ContentSectionRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # loaded entities outlive the block; keep rollback from expiring them
        self.session.expunge_all()
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
