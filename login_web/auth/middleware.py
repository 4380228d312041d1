"""
Authentication middleware.

AuthMiddleware is a FastAPI dependency that gates protected routes: it takes
the bearer credentials from the Authorization header, verifies the token, and
hands the verified identity to the route as an AuthContext value.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from login_web.auth.exceptions import InvalidToken, Unauthorized
from login_web.auth.jwt import TokenIssuer

logger = logging.getLogger(__name__)

# Bearer scheme; registered in the OpenAPI docs as a security scheme
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext(BaseModel):
    """Identity of the caller for the duration of one request."""
    user_id: int
    token: str
    expires_at: datetime


class AuthMiddleware:
    """
    Dependency for bearer-token authentication.

    Every failure (no header, wrong scheme, malformed, tampered or expired
    token) raises the same Unauthorized.
    """

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> AuthContext:
        if credentials is None:
            logger.info("Rejected request to %s: missing or malformed Authorization header", request.url.path)
            raise Unauthorized()

        issuer: TokenIssuer = request.app.state.token_issuer
        try:
            token_data = issuer.decode(credentials.credentials)
        except InvalidToken:
            raise Unauthorized()

        return AuthContext(
            user_id=token_data.user_id,
            token=credentials.credentials,
            expires_at=token_data.expires_at,
        )


require_user = AuthMiddleware()
