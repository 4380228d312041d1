"""
Password hashing and verification.

Uses bcrypt: salted, with a configurable work factor, and a constant-time
comparison on verify.
"""
import logging

import bcrypt

from login_web.auth.exceptions import HashingError

logger = logging.getLogger(__name__)

MIN_ROUNDS = 4
MAX_ROUNDS = 31
# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt hasher with a fixed work factor."""

    def __init__(self, rounds: int = 12):
        if not isinstance(rounds, int) or not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise HashingError(
                f"bcrypt work factor must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds!r}"
            )
        self.rounds = rounds
        # Built up front so the first unknown-user login costs the same as later ones
        self._dummy_hash = self.hash("dummy-password")

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh salt.

        Raises:
            HashingError: If a salt cannot be generated or bcrypt rejects the input
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
        except (ValueError, TypeError, OSError, NotImplementedError) as e:
            raise HashingError(f"Password hashing failed: {e}") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning("Password verification failed on malformed input: %s", e.__class__.__name__)
            return False

    def dummy_verify(self, password: str) -> None:
        """Spend one verification's worth of time, for callers with no user to check."""
        self.verify(password, self._dummy_hash)
