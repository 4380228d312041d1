"""
JWT token handling for authentication.

This module provides functionality for:
- Issuing signed access tokens bound to a user id
- Verifying tokens (signature, expiry, subject)

The signing secret is held by a TokenIssuer instance built at startup;
there is no module-level secret.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import BaseModel

from login_web.auth.exceptions import InvalidToken, TokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 30
REQUIRED_CLAIMS = ["sub", "exp", "iat"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Token(BaseModel):
    """Token response model."""
    access_token: str
    token_type: str = "bearer"
    expires_at: int  # Unix timestamp


class TokenData(BaseModel):
    """Verified token payload."""
    user_id: int
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """
    Issues and verifies HMAC-signed bearer tokens.

    Args:
        secret: Server-held signing secret
        algorithm: JWT algorithm; only this one is accepted on verify
        ttl: Default token lifetime
        clock: Returns the current UTC time used for iat/exp
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = ALGORITHM,
        ttl: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    def issue(self, user_id: int, ttl: Optional[timedelta] = None) -> Token:
        """
        Create a signed token for a user.

        Args:
            user_id: Subject of the token
            ttl: Lifetime override, defaults to the issuer's ttl

        Returns:
            Token with the encoded JWT and its expiry

        Raises:
            TokenError: If the token cannot be signed
        """
        ttl = self.ttl if ttl is None else ttl
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")

        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(ttl.total_seconds())
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": expires_at,
        }
        try:
            encoded = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            raise TokenError(f"Failed to sign token: {e}") from e

        return Token(access_token=encoded, expires_at=expires_at)

    def decode(self, token: str) -> TokenData:
        """
        Verify a token and return its claims.

        Raises:
            InvalidToken: With reason malformed, signature, expired or subject
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise self._reject(InvalidToken.EXPIRED)
        except jwt.InvalidSignatureError:
            raise self._reject(InvalidToken.SIGNATURE)
        except jwt.MissingRequiredClaimError as e:
            reason = InvalidToken.SUBJECT if e.claim == "sub" else InvalidToken.MALFORMED
            raise self._reject(reason)
        except jwt.InvalidTokenError:
            raise self._reject(InvalidToken.MALFORMED)

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise self._reject(InvalidToken.SUBJECT)
        if user_id <= 0:
            raise self._reject(InvalidToken.SUBJECT)

        return TokenData(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def verify(self, token: str) -> int:
        """Verify a token and return the user id it was issued for."""
        return self.decode(token).user_id

    @staticmethod
    def _reject(reason: str) -> InvalidToken:
        logger.info("Rejected token: %s", reason)
        return InvalidToken(reason)
