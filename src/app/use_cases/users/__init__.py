"""
User Management Use Cases

All user-related business logic.
"""

from .list_users_use_case import ListUsersUseCase
from .get_user_use_case import GetUserUseCase, GetUserActivityUseCase
from .create_user_use_case import CreateUserUseCase
from .update_user_use_case import UpdateUserUseCase
from .change_role_use_case import ChangeRoleUseCase
from .change_status_use_case import ChangeStatusUseCase, DeactivateUserUseCase
from .bulk_user_operation_use_case import BulkUserOperationUseCase
from .export_users_use_case import EXPORT_COLUMNS, ExportUsersUseCase
from .dtos import (
    BulkOperationResult,
    CreateUserCommand,
    Pagination,
    UserChange,
    UserDetail,
    UserList,
)

__all__ = [
    "ListUsersUseCase",
    "GetUserUseCase",
    "GetUserActivityUseCase",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "ChangeRoleUseCase",
    "ChangeStatusUseCase",
    "DeactivateUserUseCase",
    "BulkUserOperationUseCase",
    "ExportUsersUseCase",
    "EXPORT_COLUMNS",
    "BulkOperationResult",
    "CreateUserCommand",
    "Pagination",
    "UserChange",
    "UserDetail",
    "UserList",
]
