"""
Authentication Use Cases

All authentication-related business logic.
"""

from .authenticate_use_case import AuthenticateUseCase, UNAUTHENTICATED
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .register_use_case import RegisterUseCase
from .change_password_use_case import ChangePasswordUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .password_policy import validate_password
from .dtos import (
    AuthenticatedPrincipal,
    ChangePasswordResponse,
    ConfirmPasswordResetResponse,
    LoginResponse,
    MessageResponse,
    RefreshTokenResponse,
    RegisterCommand,
    UserInfo,
    UserProfile,
)

__all__ = [
    # Use Cases
    "AuthenticateUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RegisterUseCase",
    "ChangePasswordUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "validate_password",
    "UNAUTHENTICATED",
    # DTOs
    "AuthenticatedPrincipal",
    "ChangePasswordResponse",
    "ConfirmPasswordResetResponse",
    "LoginResponse",
    "MessageResponse",
    "RefreshTokenResponse",
    "RegisterCommand",
    "UserInfo",
    "UserProfile",
]
