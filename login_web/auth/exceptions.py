"""
Exceptions for the auth service.

Two layers:
- AuthServiceError subclasses are what clients see. Each carries a status
  code and a fixed, generic message.
- The remaining exceptions are raised by the hasher, store and token issuer
  and are translated by AuthService before they reach a router.
"""
from typing import Dict, Optional


class AuthServiceError(Exception):
    """Base class for errors rendered to the client."""
    status_code = 500
    message = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(AuthServiceError):
    status_code = 400
    message = "Invalid request"


class Conflict(AuthServiceError):
    status_code = 409
    message = "Username already exists"


class Unauthorized(AuthServiceError):
    """Bad credentials or a missing/invalid token. Never says which."""
    status_code = 401
    message = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self):
        super().__init__()


class NotFound(AuthServiceError):
    status_code = 404
    message = "User not found"


class InternalError(AuthServiceError):
    status_code = 500
    message = "Internal server error"

    def __init__(self):
        super().__init__()


class HashingError(Exception):
    """Password hashing failed (bad work factor, no entropy source)."""


class StoreError(Exception):
    """Credential store failure."""


class DuplicateUsername(StoreError):
    """Insert rejected by the unique constraint on users.username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class TokenError(Exception):
    """Token could not be signed."""


class InvalidToken(Exception):
    """
    Token rejected by the verifier.

    reason is one of MALFORMED, SIGNATURE, EXPIRED, SUBJECT and is for
    server-side logs only.
    """
    MALFORMED = "malformed"
    SIGNATURE = "signature"
    EXPIRED = "expired"
    SUBJECT = "subject"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid token: {reason}")
