"""
RefreshToken model - stateful, revocable refresh credentials.
"""

from datetime import datetime
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Boolean, Uuid
from sqlalchemy.orm import relationship

from .base import Base


class RefreshToken(Base):
    """
    Refresh token record.

    Only the SHA-256 hash of the issued token is stored so a database leak
    does not leak usable credentials.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    token_hash = Column(String(64), unique=True, nullable=False, index=True)

    is_revoked = Column(Boolean, default=False, nullable=False)

    # Timestamps
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_expires", "expires_at"),
        Index("ix_refresh_tokens_user_active", "user_id", "is_revoked"),
    )

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, revoked={self.is_revoked})>"

    def is_expired(self) -> bool:
        return datetime.utcnow() >= self.expires_at

    def is_valid(self) -> bool:
        """Not expired and not revoked."""
        return not self.is_revoked and not self.is_expired()
