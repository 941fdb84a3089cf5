"""
Data access layer.

Each repository wraps a session and issues the queries for one aggregate.
Repositories never commit; domain services own transaction boundaries.
"""

from .users import UserRepository
from .tokens import RefreshTokenRepository
from .products import ProductRepository
from .carts import CartRepository
from .orders import OrderRepository

__all__ = [
    "UserRepository",
    "RefreshTokenRepository",
    "ProductRepository",
    "CartRepository",
    "OrderRepository",
]
