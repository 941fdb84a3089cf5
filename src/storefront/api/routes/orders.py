"""
Checkout and order history routes.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_current_user, get_order_service
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import OrderResponse
from storefront.services import OrderService


def create_order(user: User = Depends(get_current_user), orders: OrderService = Depends(get_order_service)):
    """Check out the caller's cart as a pending order."""
    return ok(orders.create_order(user.id))


def list_orders(user: User = Depends(get_current_user), orders: OrderService = Depends(get_order_service)):
    return ok(orders.list_orders(user.id))


def get_order(
    order_id: UUID,
    user: User = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    return ok(orders.get_order(user, order_id))


def cancel_order(
    order_id: UUID,
    user: User = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    """Cancel a pending order and put its units back in stock."""
    return ok(orders.cancel_order(user, order_id))


router = APIRouter()

router.add_api_route(
    "", create_order, methods=["POST"],
    response_model=Envelope[OrderResponse], status_code=status.HTTP_201_CREATED,
)
router.add_api_route("", list_orders, methods=["GET"], response_model=Envelope[List[OrderResponse]])
router.add_api_route("/{order_id}", get_order, methods=["GET"], response_model=Envelope[OrderResponse])
router.add_api_route("/{order_id}/cancel", cancel_order, methods=["POST"], response_model=Envelope[OrderResponse])
