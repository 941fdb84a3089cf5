"""
SQLAlchemy models for the Storefront API.

Models:
- User: buyer, seller or admin account
- RefreshToken: hashed, revocable refresh credentials
- Product: seller-owned catalog entry with stock
- CartItem: one (user, product) line in a user's cart
- Order / OrderItem: checkout result with price snapshots
"""

from .base import Base
from .user import User, UserRole
from .refresh_token import RefreshToken
from .product import Product, ProductStatus
from .cart_item import CartItem
from .order import Order, OrderItem, OrderStatus, ORDER_TRANSITIONS

__all__ = [
    "Base",
    "User",
    "UserRole",
    "RefreshToken",
    "Product",
    "ProductStatus",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ORDER_TRANSITIONS",
]
