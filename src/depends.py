from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapter.database import Database
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import TokenService
from src.app.services.audit_recorder import IAuditRecorder
from src.app.services.mailer import IMailer
from src.app.use_cases.auth import AuthenticateUseCase, AuthenticatedPrincipal

# auto_error=False: a missing header must produce the uniform 401 envelope
security = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_unit_of_work(database: Database = Depends(get_database)):
    async with database.session() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_audit_recorder(request: Request) -> IAuditRecorder:
    return request.app.state.audit_recorder


def get_mailer(request: Request) -> IMailer:
    return request.app.state.mailer


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow=Depends(get_unit_of_work),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedPrincipal:
    """
    Dependency resolving the bearer access token to an active principal.

    Raises:
        ClientError: 401 if the token is missing, invalid or expired, or the
            principal no longer exists or is inactive
    """
    result = await AuthenticateUseCase(uow, tokens).execute(bearer_token(credentials))
    if result.is_err():
        raise ClientError(result.error, status.HTTP_401_UNAUTHORIZED)
    return result.value


def get_config(request: Request):
    return request.app.state.config
