"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.api.utils.jwt import TokenClaims
from src.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Self-service registration intent"""

    email: str
    password: str
    name: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Principal summary embedded in login responses"""

    id: str
    email: str
    name: str
    role: str


class UserProfile(BaseModel):
    """Principal profile without secret fields"""

    id: str
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(**user.to_public_dict())


class LoginResponse(BaseModel):
    """Response for login use case"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    session_id: str
    user: UserInfo


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class MessageResponse(BaseModel):
    """Plain acknowledgement"""

    message: str


class ChangePasswordResponse(BaseModel):
    message: str
    sessions_revoked: int


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    user_id: str
    message: str
    sessions_revoked: int


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Principal re-loaded by the auth gate together with its verified token"""

    user: User
    claims: TokenClaims
    token: str

    @property
    def id(self) -> UUID:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role_name
