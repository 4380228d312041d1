"""
Credential store backed by SQLAlchemy.

Every operation opens its own session from the injected factory, so one
store instance is safe to share between concurrent requests.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from login_web.auth.exceptions import DuplicateUsername, StoreError
from login_web.auth.models import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persists users and enforces username uniqueness."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def create_user(self, username: str, password_hash: str) -> int:
        """
        Insert a new user and return its id.

        Uniqueness is left to the database constraint: there is no
        check-then-insert, so concurrent registrations cannot both succeed.

        Raises:
            DuplicateUsername: If the username is already taken
            StoreError: On any other database failure
        """
        async with self._session_factory() as session:
            user = User(username=username, password_hash=password_hash)
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                # The constraint has already fired; a row with this name means
                # it was the unique index and not some other constraint.
                if await self.find_user_by_username(username) is not None:
                    raise DuplicateUsername(username) from e
                raise StoreError(f"Failed to create user: {e}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError(f"Failed to create user: {e}") from e
            return user.id

    async def find_user_by_username(self, username: str) -> Optional[User]:
        return await self._find_one(select(User).where(User.username == username))

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        return await self._find_one(select(User).where(User.id == user_id))

    async def _find_one(self, stmt) -> Optional[User]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"User lookup failed: {e}") from e
