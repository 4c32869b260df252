"""
Privilege rules shared by the user management use cases.
"""

from typing import Optional

from src.domain.entities import User, UserRole
from src.domain.result import Error, Result, Return

CANNOT_MODIFY_SELF = Error("CANNOT_MODIFY_SELF", "You cannot change your own role or status")
SUPER_ADMIN_REQUIRED = Error(
    "SUPER_ADMIN_REQUIRED", "Only a super admin can manage super admin accounts"
)
USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")


def parse_role(value: str) -> Result[UserRole]:
    try:
        return Return.ok(UserRole(value))
    except ValueError:
        allowed = ", ".join(role.value for role in UserRole)
        return Return.err(
            Error("VALIDATION_ERROR", f"Invalid role: {value}. Must be one of: {allowed}")
        )


def is_super_admin(user: User) -> bool:
    return user.role_name == UserRole.super_admin.value


def check_can_manage(actor: User, target: User) -> Optional[Error]:
    """A super_admin account can only be changed by another super_admin."""
    if is_super_admin(target) and not is_super_admin(actor):
        return SUPER_ADMIN_REQUIRED
    return None


def check_can_assign(actor: User, role: UserRole) -> Optional[Error]:
    if role == UserRole.super_admin and not is_super_admin(actor):
        return SUPER_ADMIN_REQUIRED
    return None
