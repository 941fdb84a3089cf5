"""
Shopping cart routes.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_cart_service, get_current_user
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import CartItemAdd, CartView
from storefront.services import CartService


def get_cart(user: User = Depends(get_current_user), cart: CartService = Depends(get_cart_service)):
    return ok(cart.get_cart(user.id))


def add_to_cart(
    data: CartItemAdd,
    user: User = Depends(get_current_user),
    cart: CartService = Depends(get_cart_service),
):
    """Add a product; adding one already in the cart increases its quantity."""
    return ok(cart.add_item(user.id, data.product_id, data.quantity))


def remove_from_cart(
    item_id: UUID,
    user: User = Depends(get_current_user),
    cart: CartService = Depends(get_cart_service),
):
    return ok(cart.remove_item(user.id, item_id))


router = APIRouter()

router.add_api_route("", get_cart, methods=["GET"], response_model=Envelope[CartView])
router.add_api_route("", add_to_cart, methods=["POST"], response_model=Envelope[CartView])
router.add_api_route("/{item_id}", remove_from_cart, methods=["DELETE"], response_model=Envelope[CartView])
