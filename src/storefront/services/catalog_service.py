"""
Product catalog: public browsing and seller-side management.
"""

import math
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.cache import product_key
from storefront.cache.redis_cache import Cache
from storefront.database.models import Product, ProductStatus, User
from storefront.domain.schemas import (
    Page,
    ProductCreate,
    ProductFilters,
    ProductResponse,
    ProductUpdate,
)
from storefront.repositories import ProductRepository
from storefront.utils.exceptions import Forbidden, NotFound, ValidationError
from storefront.utils.logger import get_logger
from storefront.utils.transaction import transaction_scope

logger = get_logger(__name__)

NON_NULLABLE_FIELDS = ("title", "price", "stock_quantity", "status")


def validate_price(price: Decimal) -> None:
    if price is None or price <= 0:
        raise ValidationError("Price must be greater than 0", field="price", value=price)


def validate_stock(stock_quantity: int) -> None:
    if stock_quantity is None or stock_quantity < 0:
        raise ValidationError("Stock quantity cannot be negative", field="stock_quantity", value=stock_quantity)


def clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("Title cannot be blank", field="title")
    return cleaned


class CatalogService:
    def __init__(
        self,
        db: Session,
        products: ProductRepository,
        cache: Cache,
        default_page_size: int = 20,
        max_page_size: int = 100,
        cache_ttl: Optional[int] = None,
    ):
        self.db = db
        self.products = products
        self.cache = cache
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.cache_ttl = cache_ttl

    # Queries

    def list_products(
        self,
        filters: ProductFilters,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page[ProductResponse]:
        """Active products matching filters, one page at a time."""
        if page_size is None:
            page_size = self.default_page_size

        if page < 1:
            raise ValidationError("Page must be at least 1", field="page", value=page)
        if page_size < 1 or page_size > self.max_page_size:
            raise ValidationError(
                f"Page size must be between 1 and {self.max_page_size}",
                field="page_size",
                value=page_size,
            )
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError("min_price cannot exceed max_price", field="min_price")

        items, total = self.products.search(filters, page, page_size)

        return Page[ProductResponse](
            items=[ProductResponse.model_validate(p) for p in items],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    def get_product(self, product_id: UUID, requester: Optional[User] = None) -> ProductResponse:
        """
        Read-through lookup of one product.

        Inactive products are visible only to their seller and admins.

        Raises:
            NotFound: Absent, or inactive and not visible to requester
        """
        key = product_key(product_id)
        cached = self.cache.get(key)

        if cached is not None:
            product = ProductResponse.model_validate(cached)
        else:
            row = self.products.get(product_id)
            if row is None:
                raise NotFound("Product not found", resource="product", resource_id=product_id)
            product = ProductResponse.model_validate(row)
            self.cache.set(key, product.model_dump(mode="json"), ttl=self.cache_ttl)

        if product.status != ProductStatus.ACTIVE and not self._can_manage(requester, product.seller_id):
            raise NotFound("Product not found", resource="product", resource_id=product_id)

        return product

    def list_seller_products(self, seller: User) -> List[ProductResponse]:
        self._require_seller(seller)
        return [ProductResponse.model_validate(p) for p in self.products.list_by_seller(seller.id)]

    # Commands

    def create_product(self, seller: User, fields: ProductCreate) -> ProductResponse:
        """
        Raises:
            Forbidden: Caller is not a seller
            ValidationError: price <= 0, stock < 0 or blank title
        """
        self._require_seller(seller)
        validate_price(fields.price)
        validate_stock(fields.stock_quantity)
        title = clean_title(fields.title)

        with transaction_scope(self.db):
            product = self.products.add(
                Product(
                    seller_id=seller.id,
                    title=title,
                    description=fields.description,
                    price=fields.price,
                    stock_quantity=fields.stock_quantity,
                    status=fields.status,
                )
            )

        logger.info(f"Seller {seller.id} created product {product.id}")
        return ProductResponse.model_validate(product)

    def update_product(self, seller: User, product_id: UUID, fields: ProductUpdate) -> ProductResponse:
        """
        Apply a partial update and drop the cached copy.

        Raises:
            Forbidden: Caller is not a seller, or not the owner
            NotFound: Product does not exist
            ValidationError: Invalid price or stock, or null for a required field
        """
        self._require_seller(seller)

        changes = fields.model_dump(exclude_unset=True)
        for name in NON_NULLABLE_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(f"{name} cannot be null", field=name)
        if "price" in changes:
            validate_price(changes["price"])
        if "stock_quantity" in changes:
            validate_stock(changes["stock_quantity"])
        if "title" in changes:
            changes["title"] = clean_title(changes["title"])

        product = self.products.get(product_id)
        if product is None:
            raise NotFound("Product not found", resource="product", resource_id=product_id)
        if not self._can_manage(seller, product.seller_id):
            raise Forbidden("Product belongs to another seller")

        with transaction_scope(self.db):
            for name, value in changes.items():
                setattr(product, name, value)

        self.invalidate(product_id)
        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return ProductResponse.model_validate(product)

    def invalidate(self, product_id: UUID) -> None:
        self.cache.delete(product_key(product_id))

    # Helpers

    @staticmethod
    def _require_seller(user: User) -> None:
        if user is None or not user.is_seller:
            raise Forbidden("Seller role required")

    @staticmethod
    def _can_manage(user: Optional[User], seller_id: UUID) -> bool:
        if user is None:
            return False
        return user.is_admin or user.id == seller_id
