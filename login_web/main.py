from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from login_web.auth.exceptions import AuthServiceError
from login_web.auth.jwt import TokenIssuer
from login_web.auth.password import PasswordHasher
from login_web.auth.router import router as auth_router
from login_web.auth.store import CredentialStore
from login_web.auth.users import AuthService
from login_web.base_service import (
    BaseService, MCPResponse, configure_logging, create_engine,
    create_session_factory, create_tables,
)
from login_web.config import Settings
from login_web.users.router import router as users_router

VERSION = "0.1.0"

base_service = BaseService("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Creates tables on startup and disposes the engine on shutdown.
    """
    base_service.log_event("service.startup", {"service": "main"})
    await create_tables(app.state.engine)
    yield
    await app.state.engine.dispose()
    base_service.log_event("service.shutdown", {"service": "main"})


async def auth_error_handler(request: Request, exc: AuthServiceError) -> MCPResponse:
    return MCPResponse(
        data=None,
        message=exc.message,
        status="error",
        status_code=exc.status_code,
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> MCPResponse:
    base_service.log_event("request.invalid", {"path": request.url.path, "errors": len(exc.errors())})
    return MCPResponse(data=None, message="Invalid request body", status="error", status_code=400)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application and wire its components.

    Args:
        settings: Explicit settings, read from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)

    engine = create_engine(settings.database_url)
    token_issuer = TokenIssuer(
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )
    auth_service = AuthService(
        store=CredentialStore(create_session_factory(engine)),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        issuer=token_issuer,
    )

    app = FastAPI(
        title="Login API",
        description="Username/password registration and login with JWT sessions",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.token_issuer = token_issuer
    app.state.auth_service = auth_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthServiceError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(users_router, prefix="/users", tags=["users"])

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint returning API information."""
        return base_service.mcp_response(
            message="Login API",
            data={
                "name": "Login API",
                "version": VERSION,
                "services": ["auth", "users"],
            },
        )

    @app.get("/health", tags=["health"])
    async def health_check():
        """Overall system health check."""
        return base_service.mcp_response(
            message="System health",
            data={
                "status": "ok",
                "services": {
                    "auth": "online",
                    "users": "online",
                },
            },
        )

    return app
