"""
Test configuration and fixtures for the Storefront API
"""
import os

# Settings are read once at import time; point them at the test setup first.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_DIR"] = ""
os.environ.pop("REDIS_URL", None)

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from storefront.api.main import app
from storefront.auth import get_jwt_manager, get_password_manager
from storefront.cache import NullCache
from storefront.database.connection import get_db
from storefront.database.models import Base, Product, ProductStatus, User, UserRole
from storefront.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    RefreshTokenRepository,
    UserRepository,
)
from storefront.services import AuthService, CartService, CatalogService, OrderService, UserService

TEST_PASSWORD = "Passw0rd123"


# =============================================================================
# Test Database Setup
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# FastAPI Test Client
# =============================================================================

@pytest.fixture(scope="function")
def client(db_session) -> TestClient:
    """FastAPI test client sharing the test session"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def auth_service(db_session) -> AuthService:
    return AuthService(
        db_session,
        users=UserRepository(db_session),
        tokens=RefreshTokenRepository(db_session),
        jwt_manager=get_jwt_manager(),
        passwords=get_password_manager(),
    )


@pytest.fixture
def user_service(db_session) -> UserService:
    return UserService(db_session, tokens=RefreshTokenRepository(db_session), passwords=get_password_manager())


@pytest.fixture
def catalog_service(db_session) -> CatalogService:
    return CatalogService(db_session, products=ProductRepository(db_session), cache=NullCache())


@pytest.fixture
def cart_service(db_session) -> CartService:
    return CartService(db_session, carts=CartRepository(db_session), products=ProductRepository(db_session))


@pytest.fixture
def order_service(db_session) -> OrderService:
    return OrderService(
        db_session,
        orders=OrderRepository(db_session),
        carts=CartRepository(db_session),
        products=ProductRepository(db_session),
        cache=NullCache(),
    )


# =============================================================================
# Test Data Fixtures
# =============================================================================

def make_user(db_session, email: str, role: UserRole = UserRole.BUYER) -> User:
    user = User(
        email=email,
        password_hash=get_password_manager().hash(TEST_PASSWORD),
        full_name=email.split("@")[0].title(),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_product(db_session, seller: User, title: str = "Desk Lamp", price: str = "19.99",
                 stock: int = 10, status: ProductStatus = ProductStatus.ACTIVE) -> Product:
    product = Product(
        seller_id=seller.id,
        title=title,
        description=f"{title} description",
        price=Decimal(price),
        stock_quantity=stock,
        status=status,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


def headers_for(user: User) -> dict:
    token = get_jwt_manager().create_access_token(str(user.id), user.role.value).token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def buyer(db_session) -> User:
    return make_user(db_session, "buyer@example.com")


@pytest.fixture
def other_buyer(db_session) -> User:
    return make_user(db_session, "other@example.com")


@pytest.fixture
def seller(db_session) -> User:
    return make_user(db_session, "seller@example.com", UserRole.SELLER)


@pytest.fixture
def admin(db_session) -> User:
    return make_user(db_session, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def product(db_session, seller) -> Product:
    return make_product(db_session, seller)


@pytest.fixture
def buyer_headers(buyer) -> dict:
    return headers_for(buyer)


@pytest.fixture
def seller_headers(seller) -> dict:
    return headers_for(seller)


@pytest.fixture
def admin_headers(admin) -> dict:
    return headers_for(admin)


@pytest.fixture
def user_factory(db_session):
    """Create users: user_factory("x@example.com", UserRole.SELLER)"""
    def _make(email: str, role: UserRole = UserRole.BUYER) -> User:
        return make_user(db_session, email, role)
    return _make


@pytest.fixture
def product_factory(db_session):
    """Create products: product_factory(seller, title="Mug", price="5.00", stock=3)"""
    def _make(seller: User, **kwargs) -> Product:
        return make_product(db_session, seller, **kwargs)
    return _make


@pytest.fixture
def auth_headers_for():
    return headers_for
