"""
User profile router. Every route here requires a valid bearer token.
"""
from fastapi import APIRouter, Depends

from login_web.auth.exceptions import AuthServiceError, InternalError
from login_web.auth.middleware import AuthContext, require_user
from login_web.auth.users import AuthService, get_auth_service
from login_web.base_service import BaseService

router = APIRouter(tags=["users"])

base_service = BaseService("users.router")


@router.get("/profile")
async def get_profile(
    context: AuthContext = Depends(require_user),
    service: AuthService = Depends(get_auth_service)
):
    """Return id and username of the authenticated user."""
    try:
        user_info = await service.get_profile(context.user_id)
    except AuthServiceError:
        raise
    except Exception as e:
        base_service.log_error(e, context="Get profile")
        raise InternalError() from e

    return base_service.mcp_response(
        data=user_info.model_dump(),
        message="User information retrieved successfully",
    )
