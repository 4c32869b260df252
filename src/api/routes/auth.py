from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError
from src.api.utils.privileged import ActionContext, PrivilegedAction, client_ip
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthenticatedPrincipal,
    ChangePasswordUseCase,
    ConfirmPasswordResetUseCase,
    LoginResponse,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    UserProfile,
)
from src.app.use_cases.users import UpdateUserUseCase
from src.depends import (
    get_config,
    get_current_principal,
    get_mailer,
    get_token_service,
    get_unit_of_work,
)
from src.domain.entities import AuditAction
from src.domain.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])

register_action = PrivilegedAction(AuditAction.CREATE, "user", authenticated=False)
login_action = PrivilegedAction(
    AuditAction.LOGIN, "auth", authenticated=False, failure_action=AuditAction.LOGIN_FAILED
)
logout_action = PrivilegedAction(AuditAction.LOGOUT, "auth")
update_profile_action = PrivilegedAction(AuditAction.UPDATE, "user")
change_password_action = PrivilegedAction(AuditAction.PASSWORD_CHANGE, "user")
reset_password_action = PrivilegedAction(
    AuditAction.PASSWORD_RESET, "user", authenticated=False
)


def set_refresh_cookie(response: Response, config, refresh_token: str) -> None:
    response.set_cookie(
        key=config.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=config.REFRESH_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=config.REFRESH_COOKIE_SECURE,
        samesite="strict",
    )


class RegisterRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")


class UserEnvelope(BaseModel):
    user: UserProfile


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserEnvelope)
async def register(
    body: RegisterRequest,
    action=Depends(register_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Self-service registration. Creates an active account with role=user.

    Raises:
        - 400 Bad Request: Invalid input
        - 409 Conflict: Email already exists
    """

    async def handler(ctx: ActionContext):
        command = RegisterCommand(email=body.email, password=body.password, name=body.name)
        result = await RegisterUseCase(uow).execute(command)
        if result.is_ok():
            ctx.actor_id = UUID(result.value.id)
            ctx.resource_id = result.value.id
            ctx.record_changes(None, result.value.model_dump())
        return result

    profile = await action.run(handler, payload=body)
    return UserEnvelope(user=profile)


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    action=Depends(login_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens=Depends(get_token_service),
    config=Depends(get_config),
):
    """
    Exchange email and password for an access/refresh token pair.

    The refresh token is returned in the body and set as an httpOnly cookie.
    Every attempt is audited: LOGIN on success, LOGIN_FAILED otherwise
    (attributed to the account matching the email, when there is one).

    Raises:
        - 401 Unauthorized: Invalid credentials (same message for unknown email,
          wrong password and inactive account)
    """

    async def handler(ctx: ActionContext):
        ctx.actor_email = body.email
        result = await LoginUseCase(uow, tokens).execute(
            body.email,
            body.password,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
        if result.is_ok():
            ctx.actor_id = UUID(result.value.user.id)
            ctx.resource_id = result.value.user.id
            ctx.details["session_id"] = result.value.session_id
        return result

    login_response = await action.run(handler, payload=body)
    set_refresh_cookie(response, config, login_response.refresh_token)
    return login_response


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = Field(
        None, description="Refresh token; falls back to the cookie"
    )


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh_token(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens=Depends(get_token_service),
    config=Depends(get_config),
):
    """
    Exchange a refresh token for a new token pair.

    The refresh token is rotated: the presented one stops working, and
    presenting it again revokes the whole session.

    Raises:
        - 401 Unauthorized: Missing, invalid, expired, revoked or reused refresh token
    """
    token = (body.refresh_token if body else None) or request.cookies.get(
        config.REFRESH_COOKIE_NAME
    )
    if not token:
        raise ClientError(
            Error("INVALID_TOKEN", "Refresh token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await RefreshTokenUseCase(uow, tokens).execute(token)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    set_refresh_cookie(response, config, result.value.refresh_token)
    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    response: Response,
    action=Depends(logout_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """Revoke the current session and clear the refresh cookie."""

    async def handler(ctx: ActionContext):
        session_id = ctx.principal.claims.session_id
        if session_id is not None:
            ctx.resource_id = str(session_id)
        return await LogoutUseCase(uow).execute(session_id)

    message = await action.run(handler)
    response.delete_cookie(config.REFRESH_COOKIE_NAME, httponly=True, samesite="strict")
    return message


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserEnvelope)
async def me(principal: AuthenticatedPrincipal = Depends(get_current_principal)):
    """Current principal profile (no password or token fields)."""
    return UserEnvelope(user=UserProfile.from_user(principal.user))


class UpdateProfileRequest(BaseModel):
    """
    Self-service profile edit.

    role and is_active are accepted but ignored: a principal cannot change
    their own privileges.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


@router.patch("/me", status_code=status.HTTP_200_OK, response_model=UserEnvelope)
async def update_me(
    body: UpdateProfileRequest,
    action=Depends(update_profile_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update the current principal's profile.

    Raises:
        - 401 Unauthorized: Not authenticated
        - 409 Conflict: Email already exists
    """

    async def handler(ctx: ActionContext):
        actor = ctx.principal.user
        ctx.resource_id = str(actor.id)
        result = await UpdateUserUseCase(uow).execute(
            actor, actor.id, body.model_dump(exclude_unset=True, exclude_none=True)
        )
        if result.is_ok():
            ctx.record_changes(result.value.before, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return UserEnvelope(user=change.user)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.post("/change-password", status_code=status.HTTP_200_OK)
async def change_password(
    body: ChangePasswordRequest,
    action=Depends(change_password_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change the current principal's password. Other sessions are revoked.

    Raises:
        - 400 Bad Request: Current password wrong or new password too weak
    """

    async def handler(ctx: ActionContext):
        principal = ctx.principal
        ctx.resource_id = str(principal.id)
        return await ChangePasswordUseCase(uow).execute(
            principal.id,
            body.current_password,
            body.new_password,
            session_id=principal.claims.session_id,
        )

    return await action.run(handler, payload=body)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer=Depends(get_mailer),
):
    """
    Request a password reset e-mail.

    Always returns the same message, whether or not the account exists.
    """
    result = await RequestPasswordResetUseCase(uow, mailer).execute(body.email)
    return result.value


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    action=Depends(reset_password_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Set a new password using a reset token. All sessions are revoked.

    Raises:
        - 400 Bad Request: Invalid, expired or used token; weak password
    """

    async def handler(ctx: ActionContext):
        result = await ConfirmPasswordResetUseCase(uow).execute(body.token, body.password)
        if result.is_ok():
            ctx.actor_id = UUID(result.value.user_id)
            ctx.resource_id = result.value.user_id
        return result

    confirmation = await action.run(handler, payload=body)
    return MessageResponse(message=confirmation.message)
