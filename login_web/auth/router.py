"""
Authentication router.

This module provides FastAPI router for authentication endpoints:
- User registration and login
- Logout (authenticated)
- Health check
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from login_web.auth.exceptions import AuthServiceError, InternalError
from login_web.auth.middleware import AuthContext, require_user
from login_web.auth.users import AuthService, UserCreate, UserLogin, get_auth_service
from login_web.base_service import BaseService

# Create router
router = APIRouter(tags=["auth"])

base_service = BaseService("auth.router")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user.

    Returns:
        201 with the new user's id and username
    """
    try:
        user_info = await service.register(user_data.username, user_data.password)
    except AuthServiceError:
        raise
    except Exception as e:
        base_service.log_error(e, context="User registration")
        raise InternalError() from e

    return base_service.mcp_response(
        data=user_info.model_dump(),
        message="User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login(
    login_data: UserLogin,
    service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate a user and return a token.

    Returns:
        200 with the bearer token and its expiry
    """
    try:
        token = await service.login(login_data.username, login_data.password)
    except AuthServiceError:
        raise
    except Exception as e:
        base_service.log_error(e, context="User login")
        raise InternalError() from e

    return base_service.mcp_response(
        data={
            "token": token.access_token,
            "token_type": token.token_type,
            "expires_at": token.expires_at,
        },
        message="Login successful",
    )


@router.post("/logout")
async def logout(
    context: AuthContext = Depends(require_user),
    service: AuthService = Depends(get_auth_service)
):
    """Acknowledge logout for the authenticated user."""
    try:
        await service.logout(context)
    except AuthServiceError:
        raise
    except Exception as e:
        base_service.log_error(e, context="User logout")
        raise InternalError() from e

    return base_service.mcp_response(message="Logged out")


# --- Health Check ---

@router.get("/ping")
async def ping():
    """Health check endpoint for the auth service."""
    return base_service.mcp_response(
        message="Auth service is alive",
        data={"timestamp": datetime.now(timezone.utc).isoformat()}
    )
