"""
Domain services.

Services enforce business rules and own transaction boundaries. Their
repositories and collaborators are passed in explicitly; see
storefront.api.dependencies for the request-time wiring.
"""

from .auth_service import AuthService
from .user_service import UserService
from .catalog_service import CatalogService
from .cart_service import CartService
from .order_service import OrderService

__all__ = ["AuthService", "UserService", "CatalogService", "CartService", "OrderService"]
