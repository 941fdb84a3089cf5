"""
JWT token management for authentication.

Access tokens are stateless and self-verifying. Refresh tokens are signed
with their own secret and also persisted (hashed) so they can be revoked.
"""

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from jose import JWTError, jwt

from storefront.utils.config import AuthConfig, get_settings
from storefront.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class IssuedToken:
    """An encoded token and the moment it stops being valid."""
    token: str
    jti: str
    expires_at: datetime


def hash_token(token: str) -> str:
    """SHA-256 digest used to store refresh tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class JWTManager:
    """Creates and verifies access and refresh tokens."""

    def __init__(self, config: AuthConfig):
        """
        Initialize JWT manager.

        Args:
            config: Secrets, algorithm and token lifetimes
        """
        if not config.secret_key:
            raise ValueError("SECRET_KEY is required for JWT")

        self.secret_key = config.secret_key
        self.refresh_secret_key = config.refresh_secret_key
        self.algorithm = config.algorithm
        self.access_token_expire = timedelta(minutes=config.access_token_expire_minutes)
        self.refresh_token_expire = timedelta(days=config.refresh_token_expire_days)

        logger.info(
            f"Initialized JWT manager (algorithm={self.algorithm}, "
            f"access_ttl={config.access_token_expire_minutes}m)"
        )

    @property
    def access_token_ttl_seconds(self) -> int:
        return int(self.access_token_expire.total_seconds())

    def _secret_for(self, token_type: str) -> str:
        return self.refresh_secret_key if token_type == REFRESH else self.secret_key

    def _issue(self, claims: Dict[str, Any], token_type: str, ttl: timedelta) -> IssuedToken:
        now = datetime.utcnow()
        expires = now + ttl
        jti = str(uuid.uuid4())

        payload = {
            **claims,
            "type": token_type,
            "iat": now,
            "exp": expires,
            "jti": jti,
        }

        token = jwt.encode(payload, self._secret_for(token_type), algorithm=self.algorithm)
        return IssuedToken(token=token, jti=jti, expires_at=expires)

    def create_access_token(self, user_id: str, role: str) -> IssuedToken:
        """
        Create a short-lived access token.

        Args:
            user_id: User UUID as string
            role: User role value

        Returns:
            Issued token with its expiry
        """
        issued = self._issue({"sub": user_id, "role": role}, ACCESS, self.access_token_expire)
        logger.debug(f"Created access token for user {user_id} (expires in {self.access_token_expire})")
        return issued

    def create_refresh_token(self, user_id: str) -> IssuedToken:
        """Create a long-lived refresh token; the caller persists its hash."""
        issued = self._issue({"sub": user_id}, REFRESH, self.refresh_token_expire)
        logger.debug(f"Created refresh token for user {user_id} (expires in {self.refresh_token_expire})")
        return issued

    def verify_token(self, token: str, token_type: str = ACCESS) -> Dict[str, Any]:
        """
        Verify signature, expiry and type, then return the payload.

        Raises:
            JWTError: If token is invalid, expired or of another type
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_for(token_type),
                algorithms=[self.algorithm],
            )

            if payload.get("type") != token_type:
                raise JWTError(f"Invalid token type: expected {token_type}, got {payload.get('type')}")
            if not payload.get("sub"):
                raise JWTError("Token has no subject")

            return payload

        except JWTError as e:
            logger.warning(f"Token verification failed: {e}")
            raise


# Global JWT manager instance
_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create global JWT manager instance."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager(get_settings().auth)
    return _jwt_manager
