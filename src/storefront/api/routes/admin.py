"""
Administrative routes.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_order_service, require_admin
from storefront.api.schemas import Envelope, ok
from storefront.database.models import User
from storefront.domain.schemas import OrderResponse, OrderStatusUpdate
from storefront.services import OrderService


def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    orders: OrderService = Depends(get_order_service),
):
    """Move an order along pending -> paid -> shipped, or cancel it."""
    return ok(orders.update_status(admin, order_id, data.status))


router = APIRouter()

router.add_api_route(
    "/orders/{order_id}/status", update_order_status, methods=["PATCH"],
    response_model=Envelope[OrderResponse],
)
