"""
Public catalog routes.
"""

from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_catalog_service, get_optional_user
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import Page, ProductFilters, ProductResponse
from storefront.services import CatalogService


def product_filters(
    search: Optional[str] = Query(None, max_length=255),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    seller_id: Optional[UUID] = None,
    in_stock: bool = False,
    sort_by: Literal["created_at", "price", "title"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> ProductFilters:
    return ProductFilters(
        search=search,
        min_price=min_price,
        max_price=max_price,
        seller_id=seller_id,
        in_stock=in_stock,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def list_products(
    filters: ProductFilters = Depends(product_filters),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Active products, filtered, sorted and paginated."""
    return ok(catalog.list_products(filters, page=page, page_size=page_size))


def get_product(
    product_id: UUID,
    user: Optional[User] = Depends(get_optional_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.get_product(product_id, requester=user))


router = APIRouter()

router.add_api_route("", list_products, methods=["GET"], response_model=Envelope[Page[ProductResponse]])
router.add_api_route("/{product_id}", get_product, methods=["GET"], response_model=Envelope[ProductResponse])
