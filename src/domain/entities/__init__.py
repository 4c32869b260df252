"""
Union Portal Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserRole,
    AuditAction,
    UpdateType,
    CONTENT_EDITORS,
    USER_MANAGERS,
    USER_VIEWERS,
    AUDIT_VIEWERS,
    DASHBOARD_VIEWERS,
    ANY_ROLE,
)

# Export all entities
from .user import User, normalize_email
from .session import Session
from .audit_event import AuditEvent
from .password_reset_token import PasswordResetToken
from .content import Service, Leader, Update, Achievement, ContentSection

__all__ = [
    # Enums
    "UserRole",
    "AuditAction",
    "UpdateType",
    # Role sets
    "CONTENT_EDITORS",
    "USER_MANAGERS",
    "USER_VIEWERS",
    "AUDIT_VIEWERS",
    "DASHBOARD_VIEWERS",
    "ANY_ROLE",
    # Entities
    "User",
    "normalize_email",
    "Session",
    "AuditEvent",
    "PasswordResetToken",
    "Service",
    "Leader",
    "Update",
    "Achievement",
    "ContentSection",
]
