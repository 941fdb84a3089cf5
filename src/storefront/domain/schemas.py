"""
Pydantic schemas shared by domain services and the HTTP layer.

Request schemas only check shape (types, lengths); business rules such as
positive prices or stock limits are enforced by the services so they hold
for every caller, not just HTTP.
"""

from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Literal, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.database.models import OrderStatus, ProductStatus, UserRole

T = TypeVar("T")


# Auth / users

class RegisterRequest(BaseModel):
    """Account registration."""
    email: EmailStr
    password: str = Field(..., max_length=128)
    full_name: Optional[str] = Field(None, max_length=255)
    role: UserRole = UserRole.BUYER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = None
    all_devices: bool = False


class TokenPair(BaseModel):
    """Issued credentials."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class UserProfile(BaseModel):
    id: UUID
    email: str
    full_name: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=255)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., max_length=128)


# Catalog

class ProductFilters(BaseModel):
    """Catalog listing filters and sort order."""
    search: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    seller_id: Optional[UUID] = None
    in_stock: bool = False
    sort_by: Literal["created_at", "price", "title"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., max_digits=12, decimal_places=2)
    stock_quantity: int
    status: ProductStatus = ProductStatus.ACTIVE


class ProductUpdate(BaseModel):
    """Partial product update; omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    stock_quantity: Optional[int] = None
    status: Optional[ProductStatus] = None


class ProductResponse(BaseModel):
    id: UUID
    seller_id: UUID
    title: str
    description: Optional[str] = None
    price: Decimal
    stock_quantity: int
    status: ProductStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    """One page of a listing."""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


# Cart

class CartItemAdd(BaseModel):
    product_id: UUID
    quantity: int = 1


class CartLine(BaseModel):
    """Cart row joined with the live product price and availability."""
    id: UUID
    product_id: UUID
    title: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    available_stock: int
    is_available: bool


class CartView(BaseModel):
    items: List[CartLine]
    item_count: int
    total: Decimal


# Orders

class OrderItemResponse(BaseModel):
    product_id: UUID
    title: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: UUID
    user_id: UUID
    status: OrderStatus
    total: Decimal
    items: List[OrderItemResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: str
