"""
Update User Use Case

Profile edits by an administrator or by the principal itself.
"""

import logging
from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from src.app.repositories.user_repository import DuplicateEmailError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.entities import User, normalize_email
from src.domain.result import Error, Result, Return
from .dtos import UserChange
from .policies import USER_NOT_FOUND, check_can_assign, check_can_manage, parse_role

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "role", "is_active")
SELF_PROTECTED_FIELDS = ("role", "is_active")


class UpdateUserUseCase:
    """
    Business Rules:
    - Only name, email, role and is_active can be changed here
    - When the actor edits their own record, role and is_active are silently
      dropped from the change set; the remaining fields still apply
    - Only a super_admin may edit a super_admin or assign the super_admin role
    - Email stays unique
    - Deactivation revokes every session of the target
    - Returns before/after snapshots of the public fields
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, user_id: UUID, changes: Dict[str, Any]
    ) -> Result[UserChange]:
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}

        if actor.id == user_id:
            stripped = [field for field in SELF_PROTECTED_FIELDS if field in changes]
            if stripped:
                logger.info("Ignoring self-update of %s by user %s", ", ".join(stripped), actor.id)
            for field in SELF_PROTECTED_FIELDS:
                changes.pop(field, None)

        if "role" in changes:
            parsed = parse_role(changes["role"])
            if parsed.is_err():
                return Return.err(parsed.error)
            changes["role"] = parsed.value
            denied = check_can_assign(actor, parsed.value)
            if denied:
                return Return.err(denied)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            if actor.id != user.id:
                denied = check_can_manage(actor, user)
                if denied:
                    return Return.err(denied)

            before = user.to_public_dict()

            if "email" in changes:
                email = normalize_email(changes["email"])
                if email != user.email:
                    existing = await self.uow.users.get_by_email(email)
                    if existing is not None:
                        return Return.err(
                            Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                        )
                changes["email"] = email

            if "name" in changes:
                changes["name"] = changes["name"].strip()

            deactivated = user.is_active and changes.get("is_active") is False

            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = datetime.utcnow()
            try:
                user = await self.uow.users.update(user)
            except DuplicateEmailError:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with this email already exists")
                )

            if deactivated:
                await self.uow.sessions.revoke_all_by_user_id(user.id)

            await self.uow.commit()

        return Return.ok(
            UserChange(
                user=UserProfile.from_user(user),
                before=before,
                after=user.to_public_dict(),
            )
        )
