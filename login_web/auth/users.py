"""
User management service.

This module provides functionality for:
- User registration
- User authentication (login) and logout
- Profile lookup for authenticated users
"""
from typing import Optional

from fastapi import Request
from pydantic import BaseModel, ConfigDict
from starlette.concurrency import run_in_threadpool

from login_web.auth.exceptions import (
    Conflict, DuplicateUsername, HashingError, InternalError, InvalidInput,
    NotFound, StoreError, TokenError, Unauthorized,
)
from login_web.auth.jwt import Token, TokenIssuer
from login_web.auth.middleware import AuthContext
from login_web.auth.password import MAX_PASSWORD_BYTES, PasswordHasher
from login_web.auth.store import CredentialStore
from login_web.base_service import BaseService


class UserCreate(BaseModel):
    """Model for user registration."""
    username: str = ""
    password: str = ""


class UserLogin(BaseModel):
    """Model for user login."""
    username: str = ""
    password: str = ""


class UserOut(BaseModel):
    """Model for user information returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class AuthService(BaseService):
    """
    Registration, login, logout and profile lookup.

    Collaborators are passed in at construction; nothing here reads global
    state.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, issuer: TokenIssuer):
        super().__init__("auth")
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    async def register(self, username: str, password: str) -> UserOut:
        """
        Register a new user.

        Raises:
            InvalidInput: If username or password is empty, or the password is too long
            Conflict: If the username is taken
            InternalError: On hashing or store failure
        """
        self._validate_credentials(username, password)

        try:
            password_hash = await run_in_threadpool(self.hasher.hash, password)
        except HashingError as e:
            self.log_error(e, context="User registration")
            raise InternalError() from e

        try:
            user_id = await self.store.create_user(username, password_hash)
        except DuplicateUsername as e:
            self.log_event("user.register.conflict", {"username": username})
            raise Conflict() from e
        except StoreError as e:
            self.log_error(e, context="User registration")
            raise InternalError() from e

        self.log_event("user.registered", {"id": user_id, "username": username})
        return UserOut(id=user_id, username=username)

    async def login(self, username: str, password: str) -> Token:
        """
        Authenticate a user and issue a token.

        Unknown usernames and wrong passwords raise the same Unauthorized.
        """
        if not username or not password:
            raise Unauthorized()
        if not (_is_utf8(username) and _is_utf8(password)):
            raise Unauthorized()

        try:
            user = await self.store.find_user_by_username(username)
        except StoreError as e:
            self.log_error(e, context="User login")
            raise InternalError() from e

        if user is None:
            await run_in_threadpool(self.hasher.dummy_verify, password)
            self.log_event("user.login.failed", {"username": username, "reason": "unknown_user"})
            raise Unauthorized()

        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            self.log_event("user.login.failed", {"username": username, "reason": "bad_password"})
            raise Unauthorized()

        try:
            token = self.issuer.issue(user.id)
        except TokenError as e:
            self.log_error(e, context="User login")
            raise InternalError() from e

        self.log_event("user.login", {"id": user.id, "username": user.username})
        return token

    async def logout(self, context: AuthContext) -> None:
        """
        Acknowledge a logout.

        Tokens stay valid until they expire; there is no revocation list.
        """
        self.log_event("user.logout", {"id": context.user_id})

    async def get_profile(self, user_id: int) -> UserOut:
        """
        Look up the profile of an authenticated user.

        Raises:
            NotFound: If the user no longer exists
            InternalError: On store failure
        """
        try:
            user = await self.store.find_user_by_id(user_id)
        except StoreError as e:
            self.log_error(e, context="Get profile")
            raise InternalError() from e

        if user is None:
            raise NotFound()
        return UserOut.model_validate(user)

    @staticmethod
    def _validate_credentials(username: Optional[str], password: Optional[str]) -> None:
        if not username or not username.strip() or not password:
            raise InvalidInput("Username and password are required")
        if not (_is_utf8(username) and _is_utf8(password)):
            raise InvalidInput("Username and password must be valid UTF-8 text")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def _is_utf8(value: str) -> bool:
    # JSON allows lone surrogates such as "\ud800", which have no UTF-8 form
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the AuthService built by the application factory."""
    return request.app.state.auth_service
