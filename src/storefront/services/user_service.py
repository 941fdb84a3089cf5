"""
Profile management and account deactivation.
"""

from typing import Optional

from sqlalchemy.orm import Session

from storefront.auth.password import PasswordManager
from storefront.database.models import User
from storefront.domain.schemas import UserProfile
from storefront.repositories import RefreshTokenRepository
from storefront.utils.exceptions import Unauthorized
from storefront.utils.logger import get_logger
from storefront.utils.transaction import transaction_scope

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session, tokens: RefreshTokenRepository, passwords: PasswordManager):
        self.db = db
        self.tokens = tokens
        self.passwords = passwords

    def get_profile(self, user: User) -> UserProfile:
        return UserProfile.model_validate(user)

    def update_profile(self, user: User, full_name: Optional[str]) -> UserProfile:
        with transaction_scope(self.db):
            user.full_name = full_name.strip() if full_name else None
        return UserProfile.model_validate(user)

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Replace the password and sign the user out everywhere.

        Raises:
            Unauthorized: current_password does not match
            ValidationError: new_password is too weak
        """
        if not self.passwords.verify(current_password, user.password_hash):
            raise Unauthorized("Current password is incorrect")
        self.passwords.validate_strength(new_password)

        with transaction_scope(self.db):
            user.password_hash = self.passwords.hash(new_password)
            self.tokens.revoke_all_for_user(user.id)

        logger.info(f"Password changed for user {user.email}")

    def deactivate(self, user: User) -> None:
        """Soft-delete: the row stays, every credential stops working."""
        with transaction_scope(self.db):
            user.is_active = False
            revoked = self.tokens.revoke_all_for_user(user.id)

        logger.info(f"User {user.email} deactivated ({revoked} refresh tokens revoked)")
