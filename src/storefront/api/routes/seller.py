"""
Seller-side catalog management.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_catalog_service, get_current_user
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import ProductCreate, ProductResponse, ProductUpdate
from storefront.services import CatalogService


def list_own_products(
    user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """All of the caller's products, including inactive ones."""
    return ok(catalog.list_seller_products(user))


def create_product(
    data: ProductCreate,
    user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.create_product(user, data))


def update_product(
    product_id: UUID,
    data: ProductUpdate,
    user: User = Depends(get_current_user),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Partial update by the owning seller (or an admin)."""
    return ok(catalog.update_product(user, product_id, data))


router = APIRouter()

router.add_api_route("/products", list_own_products, methods=["GET"], response_model=Envelope[List[ProductResponse]])
router.add_api_route(
    "/products", create_product, methods=["POST"],
    response_model=Envelope[ProductResponse], status_code=status.HTTP_201_CREATED,
)
router.add_api_route("/products/{product_id}", update_product, methods=["PUT"], response_model=Envelope[ProductResponse])
