import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapter.database import Database
from src.adapter.services.audit_recorder import SqlAlchemyAuditRecorder
from src.adapter.services.mailer import LoggingMailer
from src.api.utils.jwt import TokenService
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.info(f"Validation failed on {request.method} {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Validation failed",
                "details": details,
            }
        },
    )


def create_app(ApplicationConfig, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        ApplicationConfig: Settings object (see config.py)
        database: Pre-built database, e.g. a per-test SQLite file. When omitted
            one is created from DB_URI and owned by the app lifespan.
    """
    owns_database = database is None
    if owns_database:
        database = Database(
            ApplicationConfig.DB_URI, connect_timeout=ApplicationConfig.DB_CONNECT_TIMEOUT
        )

    audit_recorder = SqlAlchemyAuditRecorder(database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.init()
        await audit_recorder.purge_expired(ApplicationConfig.AUDIT_RETENTION_DAYS)
        yield
        if owns_database:
            await database.close()

    app = FastAPI(title=ApplicationConfig.APP_NAME, version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.database = database
    app.state.token_service = TokenService.from_config(ApplicationConfig)
    app.state.audit_recorder = audit_recorder
    app.state.mailer = LoggingMailer()
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import audit, auth, content, dashboard, health, users

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health.router)
    app.include_router(auth.router, prefix=prefix)
    app.include_router(users.router, prefix=prefix)
    app.include_router(content.services_router, prefix=prefix)
    app.include_router(content.leaders_router, prefix=prefix)
    app.include_router(content.updates_router, prefix=prefix)
    app.include_router(content.achievements_router, prefix=prefix)
    app.include_router(content.sections_router, prefix=prefix)
    app.include_router(audit.router, prefix=prefix)
    app.include_router(dashboard.router, prefix=prefix)

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
