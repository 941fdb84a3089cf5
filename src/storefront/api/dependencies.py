"""
Request-time wiring.

Each service is built from the request session and its repositories here,
so routes and services never reach for globals themselves.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.auth import JWTManager, PasswordManager, get_jwt_manager, get_password_manager
from storefront.cache import get_cache
from storefront.cache.redis_cache import Cache
from storefront.database.connection import get_db
from storefront.database.models import User
from storefront.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    RefreshTokenRepository,
    UserRepository,
)
from storefront.services import AuthService, CartService, CatalogService, OrderService, UserService
from storefront.utils.config import Settings, get_settings
from storefront.utils.exceptions import Forbidden, Unauthorized

security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Session = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    passwords: PasswordManager = Depends(get_password_manager),
) -> AuthService:
    return AuthService(
        db,
        users=UserRepository(db),
        tokens=RefreshTokenRepository(db),
        jwt_manager=jwt_manager,
        passwords=passwords,
    )


def get_user_service(
    db: Session = Depends(get_db),
    passwords: PasswordManager = Depends(get_password_manager),
) -> UserService:
    return UserService(db, tokens=RefreshTokenRepository(db), passwords=passwords)


def get_catalog_service(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    return CatalogService(
        db,
        products=ProductRepository(db),
        cache=cache,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
        cache_ttl=settings.cache_ttl_seconds,
    )


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db, carts=CartRepository(db), products=ProductRepository(db))


def get_order_service(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
) -> OrderService:
    return OrderService(
        db,
        orders=OrderRepository(db),
        carts=CartRepository(db),
        products=ProductRepository(db),
        cache=cache,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Dependency to get the authenticated user.

    Usage:
        @router.get("/protected")
        def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authenticated")
    return auth.authenticate(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """Like get_current_user, but anonymous or unverifiable callers get None instead of 401."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth.authenticate(credentials.credentials)
    except Unauthorized:
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Admin role required")
    return user
