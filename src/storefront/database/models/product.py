"""
Product model - seller-owned catalog entries.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Numeric, Text, DateTime, ForeignKey, Index,
    CheckConstraint, Enum as SQLEnum, Uuid,
)
from sqlalchemy.orm import relationship

from .base import Base


class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Product(Base):
    """
    Catalog product.

    Stock can never go negative; the check constraint backs up the
    conditional decrement done at checkout.
    """

    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    seller_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    status = Column(SQLEnum(ProductStatus, name="product_status"), nullable=False, default=ProductStatus.ACTIVE)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    seller = relationship("User", back_populates="products")

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        Index("ix_products_status_created", "status", "created_at"),
    )

    def __repr__(self):
        return (
            f"<Product(id={self.id}, seller={self.seller_id}, "
            f"title='{self.title}', stock={self.stock_quantity})>"
        )

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE
