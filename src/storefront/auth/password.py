"""
Password hashing, verification and strength rules.
"""

import re
from typing import Optional

import bcrypt

from storefront.utils.config import get_settings
from storefront.utils.exceptions import ValidationError
from storefront.utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


class PasswordManager:
    """
    Manages password hashing and verification using bcrypt.

    Every hash gets a fresh salt from bcrypt.gensalt, so equal passwords
    never produce equal hashes.
    """

    def __init__(self, rounds: int = 12, min_length: int = 8):
        self.rounds = rounds
        self.min_length = min_length

    def validate_strength(self, password: str) -> None:
        """
        Reject weak passwords.

        Raises:
            ValidationError: If the password is too short or lacks a letter
                or a digit.
        """
        if not password or len(password) < self.min_length:
            raise ValidationError(
                f"Password must be at least {self.min_length} characters",
                field="password",
            )
        if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
            raise ValidationError(
                "Password must contain at least one letter and one digit",
                field="password",
            )

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Args:
            password: Plaintext password

        Returns:
            bcrypt hash string (salt embedded)
        """
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Returns:
            True if the password matches, False otherwise (including
            malformed hashes).
        """
        try:
            password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification failed: {e}")
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the hash was made with a different cost factor."""
        try:
            return int(hashed_password.split("$")[2]) != self.rounds
        except (IndexError, ValueError):
            return True


_password_manager: Optional[PasswordManager] = None


def get_password_manager() -> PasswordManager:
    global _password_manager
    if _password_manager is None:
        auth = get_settings().auth
        _password_manager = PasswordManager(
            rounds=auth.bcrypt_rounds,
            min_length=auth.password_min_length,
        )
    return _password_manager
