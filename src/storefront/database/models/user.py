"""
User model - buyer, seller and admin accounts.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Uuid
from sqlalchemy.orm import relationship

from .base import Base


class UserRole(str, enum.Enum):
    """Account roles."""
    BUYER = "buyer"      # Can shop and check out
    SELLER = "seller"    # Can also manage own products
    ADMIN = "admin"      # Can manage any product and order status


class User(Base):
    """
    Account used for authentication and ownership.

    Users are never hard-deleted; deactivation flips is_active.
    """

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255), nullable=True)
    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.BUYER)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", lazy="dynamic")
    products = relationship("Product", back_populates="seller", lazy="dynamic")
    cart_items = relationship("CartItem", back_populates="user", lazy="dynamic")
    orders = relationship("Order", back_populates="user", lazy="dynamic")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"

    @property
    def is_seller(self) -> bool:
        return self.role in (UserRole.SELLER, UserRole.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
