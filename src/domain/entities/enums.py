"""
Union Portal Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Principal role (closed set, highest privilege first)"""

    super_admin = "super_admin"
    admin = "admin"
    moderator = "moderator"
    user = "user"


class AuditAction(str, Enum):
    """Action recorded on an audit event"""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    LOGIN_FAILED = "LOGIN_FAILED"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PASSWORD_RESET = "PASSWORD_RESET"
    ROLE_CHANGE = "ROLE_CHANGE"
    STATUS_CHANGE = "STATUS_CHANGE"
    BULK_OPERATION = "BULK_OPERATION"
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"
    ACCESS_DENIED = "ACCESS_DENIED"


class UpdateType(str, Enum):
    """Kind of published update"""

    news = "news"
    job = "job"
    announcement = "announcement"


CONTENT_EDITORS = frozenset({UserRole.super_admin, UserRole.admin, UserRole.moderator})
USER_MANAGERS = frozenset({UserRole.super_admin, UserRole.admin})
USER_VIEWERS = frozenset({UserRole.super_admin, UserRole.admin, UserRole.moderator})
AUDIT_VIEWERS = frozenset({UserRole.super_admin, UserRole.admin})
DASHBOARD_VIEWERS = frozenset({UserRole.super_admin, UserRole.admin, UserRole.moderator})
ANY_ROLE = frozenset(UserRole)
