"""
Checkout and order lifecycle.

Checkout is the one multi-step mutation: stock check, stock decrement,
order insert and cart clear commit together or not at all.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.cache import product_key
from storefront.cache.redis_cache import Cache
from storefront.database.models import Order, OrderItem, OrderStatus, User
from storefront.domain.schemas import OrderResponse
from storefront.repositories import CartRepository, OrderRepository, ProductRepository
from storefront.utils.exceptions import Conflict, Forbidden, NotFound, ValidationError
from storefront.utils.logger import get_logger
from storefront.utils.transaction import transaction_scope, retry_on_deadlock

logger = get_logger(__name__)

CENTS = Decimal("0.01")


class OrderService:
    def __init__(
        self,
        db: Session,
        orders: OrderRepository,
        carts: CartRepository,
        products: ProductRepository,
        cache: Cache,
    ):
        self.db = db
        self.orders = orders
        self.carts = carts
        self.products = products
        self.cache = cache

    @retry_on_deadlock()
    def create_order(self, user_id: UUID) -> OrderResponse:
        """
        Turn the user's cart into a pending order.

        Raises:
            ValidationError: Cart is empty
            Conflict: A product is unavailable or short on stock; nothing
                is changed in that case
        """
        try:
            with transaction_scope(self.db):
                order = self._checkout(user_id)
        except IntegrityError:
            raise Conflict("Stock changed during checkout, please retry")

        for item in order.items:
            self.cache.delete(product_key(item.product_id))

        logger.info(f"Order {order.id} created for user {user_id} (total={order.total})")
        return OrderResponse.model_validate(order)

    def _checkout(self, user_id: UUID) -> Order:
        cart_items = self.carts.list_for_user(user_id)
        if not cart_items:
            raise ValidationError("Cart is empty")

        requested = OrderedDict((item.product_id, item.quantity) for item in cart_items)
        locked = {p.id: p for p in self.products.lock_many(list(requested))}

        order_items = []
        total = Decimal("0.00")

        for position, (product_id, quantity) in enumerate(requested.items()):
            product = locked.get(product_id)
            if product is None or not product.is_active:
                raise Conflict(
                    "Product is no longer available",
                    {"product_id": str(product_id)},
                )
            if product.stock_quantity < quantity or not self.products.decrement_stock(product_id, quantity):
                raise Conflict(
                    "Insufficient stock",
                    {
                        "product_id": str(product_id),
                        "requested": quantity,
                        "available": product.stock_quantity,
                    },
                )

            unit_price = Decimal(product.price).quantize(CENTS)
            line_total = (unit_price * quantity).quantize(CENTS)
            total += line_total

            order_items.append(
                OrderItem(
                    position=position,
                    product_id=product_id,
                    title=product.title,
                    quantity=quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                )
            )

        order = self.orders.add(
            Order(
                user_id=user_id,
                status=OrderStatus.PENDING,
                total=total,
                items=order_items,
            )
        )
        self.carts.clear(user_id)
        return order

    def list_orders(self, user_id: UUID) -> List[OrderResponse]:
        """Orders of the user, newest first."""
        return [OrderResponse.model_validate(o) for o in self.orders.list_for_user(user_id)]

    def get_order(self, requester: User, order_id: UUID) -> OrderResponse:
        """
        Raises:
            NotFound: No such order
            Forbidden: Order belongs to someone else
        """
        return OrderResponse.model_validate(self._owned_order(requester, order_id))

    def cancel_order(self, requester: User, order_id: UUID) -> OrderResponse:
        """Owner cancellation; only pending orders can be cancelled."""
        self._owned_order(requester, order_id)
        return self._transition(order_id, OrderStatus.CANCELLED)

    def update_status(self, admin: User, order_id: UUID, status: str) -> OrderResponse:
        """
        Administrative status change following the order state machine.

        Raises:
            Forbidden: Caller is not an admin
            ValidationError: Unknown status value
            Conflict: Transition not allowed from the current status
        """
        if not admin.is_admin:
            raise Forbidden("Admin role required")

        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError(
                f"Unknown order status, expected one of {[s.value for s in OrderStatus]}",
                field="status",
                value=status,
            )

        if self.orders.get(order_id) is None:
            raise NotFound("Order not found", resource="order", resource_id=order_id)

        return self._transition(order_id, target)

    def _transition(self, order_id: UUID, target: OrderStatus) -> OrderResponse:
        with transaction_scope(self.db):
            order = self.orders.get_for_update(order_id)
            if not order.can_transition_to(target):
                raise Conflict(
                    f"Cannot change order status from {order.status.value} to {target.value}",
                    {"status": order.status.value, "requested": target.value},
                )

            previous = order.status
            order.status = target

            # Cancelled orders give their units back
            if target == OrderStatus.CANCELLED:
                for item in order.items:
                    self.products.increment_stock(item.product_id, item.quantity)

        if target == OrderStatus.CANCELLED:
            for item in order.items:
                self.cache.delete(product_key(item.product_id))

        logger.info(f"Order {order_id} status {previous.value} -> {target.value}")
        return OrderResponse.model_validate(order)

    def _owned_order(self, requester: User, order_id: UUID) -> Order:
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found", resource="order", resource_id=order_id)
        if order.user_id != requester.id and not requester.is_admin:
            raise Forbidden("Order belongs to another user")
        return order
