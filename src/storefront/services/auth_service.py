"""
Account registration, login and token lifecycle.
"""

from typing import Optional
from uuid import UUID

from email_validator import validate_email, EmailNotValidError
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.auth.jwt_manager import JWTManager, REFRESH, ACCESS, hash_token
from storefront.auth.password import PasswordManager
from storefront.database.models import User, UserRole, RefreshToken
from storefront.domain.schemas import TokenPair, UserProfile
from storefront.repositories import UserRepository, RefreshTokenRepository
from storefront.utils.exceptions import Conflict, Unauthorized, ValidationError
from storefront.utils.logger import get_logger
from storefront.utils.transaction import transaction_scope

logger = get_logger(__name__)

SELF_ASSIGNABLE_ROLES = (UserRole.BUYER, UserRole.SELLER)


def normalize_email(email: str) -> str:
    """
    Validate syntax and return the lower-cased address.

    Raises:
        ValidationError: If the address is malformed
    """
    try:
        result = validate_email(email or "", check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email address: {e}", field="email")
    return result.normalized.lower()


class AuthService:
    def __init__(
        self,
        db: Session,
        users: UserRepository,
        tokens: RefreshTokenRepository,
        jwt_manager: JWTManager,
        passwords: PasswordManager,
    ):
        self.db = db
        self.users = users
        self.tokens = tokens
        self.jwt = jwt_manager
        self.passwords = passwords

    def register(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        role: UserRole = UserRole.BUYER,
    ) -> UserProfile:
        """
        Create a new account with a salted password hash.

        Raises:
            ValidationError: Malformed email, weak password or admin role
            Conflict: Email already registered
        """
        email = normalize_email(email)
        self.passwords.validate_strength(password)

        if role not in SELF_ASSIGNABLE_ROLES:
            raise ValidationError("Role cannot be self-assigned", field="role", value=role.value)

        if self.users.get_by_email(email):
            raise Conflict("Email already registered", {"field": "email"})

        try:
            with transaction_scope(self.db):
                user = self.users.add(
                    User(
                        email=email,
                        password_hash=self.passwords.hash(password),
                        full_name=full_name,
                        role=role,
                        is_active=True,
                    )
                )
        except IntegrityError:
            raise Conflict("Email already registered", {"field": "email"})

        logger.info(f"New {role.value} registered: {email} ({user.id})")
        return UserProfile.model_validate(user)

    def login(self, email: str, password: str) -> TokenPair:
        """
        Verify credentials and issue an access/refresh pair.

        Raises:
            Unauthorized: Unknown email, wrong password or inactive account
        """
        user = self.users.get_by_email((email or "").strip())

        if not user or not self.passwords.verify(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            raise Unauthorized("Incorrect email or password")

        if not user.is_active:
            raise Unauthorized("Account is deactivated")

        with transaction_scope(self.db):
            if self.passwords.needs_rehash(user.password_hash):
                user.password_hash = self.passwords.hash(password)
            pair = self._issue_pair(user)

        logger.info(f"User logged in: {user.email}")
        return pair

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Rotate a refresh token: revoke it and issue a fresh pair.

        A token can be rotated exactly once; any later use is rejected.

        Raises:
            Unauthorized: Invalid, expired, revoked or already-used token
        """
        try:
            payload = self.jwt.verify_token(refresh_token, token_type=REFRESH)
        except JWTError:
            raise Unauthorized("Invalid refresh token")

        stored = self.tokens.get_by_hash(hash_token(refresh_token))
        if not stored or not stored.is_valid() or str(stored.user_id) != payload["sub"]:
            raise Unauthorized("Refresh token not found or revoked")

        user = self.users.get(stored.user_id)
        if not user or not user.is_active:
            raise Unauthorized("Invalid refresh token")

        with transaction_scope(self.db):
            if not self.tokens.revoke(stored.id):
                raise Unauthorized("Refresh token not found or revoked")
            pair = self._issue_pair(user)

        logger.info(f"Token refreshed for user: {user.email}")
        return pair

    def logout(
        self,
        refresh_token: Optional[str] = None,
        user_id: Optional[UUID] = None,
        all_devices: bool = False,
    ) -> int:
        """
        Revoke refresh credentials. Idempotent.

        Unknown, already revoked, or foreign tokens are ignored. Returns the
        number of tokens revoked by this call.
        """
        if all_devices:
            if user_id is None:
                raise ValidationError("all_devices requires an authenticated user")
            with transaction_scope(self.db):
                revoked = self.tokens.revoke_all_for_user(user_id)
            logger.info(f"Revoked {revoked} refresh tokens for user {user_id}")
            return revoked

        if not refresh_token:
            raise ValidationError("refresh_token is required", field="refresh_token")

        stored = self.tokens.get_by_hash(hash_token(refresh_token))
        if not stored or stored.is_revoked:
            return 0
        if user_id is not None and stored.user_id != user_id:
            logger.warning(f"User {user_id} tried to revoke a token they do not own")
            return 0

        with transaction_scope(self.db):
            revoked = 1 if self.tokens.revoke(stored.id) else 0
        return revoked

    def authenticate(self, access_token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            Unauthorized: Invalid token, unknown or inactive user
        """
        try:
            payload = self.jwt.verify_token(access_token, token_type=ACCESS)
            user_id = UUID(payload["sub"])
        except (JWTError, ValueError):
            raise Unauthorized("Could not validate credentials")

        user = self.users.get(user_id)
        if not user or not user.is_active:
            raise Unauthorized("Could not validate credentials")
        return user

    def _issue_pair(self, user: User) -> TokenPair:
        """Issue both tokens and persist the refresh token hash. Caller commits."""
        access = self.jwt.create_access_token(str(user.id), user.role.value)
        refresh = self.jwt.create_refresh_token(str(user.id))

        self.tokens.add(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(refresh.token),
                expires_at=refresh.expires_at,
            )
        )

        return TokenPair(
            access_token=access.token,
            refresh_token=refresh.token,
            expires_in=self.jwt.access_token_ttl_seconds,
        )
