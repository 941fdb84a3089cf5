"""
Per-user shopping cart.

Carts hold no stock. Quantities are checked against current stock when an
item is added and again at checkout.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.database.models import CartItem
from storefront.domain.schemas import CartLine, CartView
from storefront.repositories import CartRepository, ProductRepository
from storefront.utils.exceptions import Conflict, NotFound, ValidationError
from storefront.utils.logger import get_logger
from storefront.utils.transaction import transaction_scope

logger = get_logger(__name__)

CENTS = Decimal("0.01")


class CartService:
    def __init__(self, db: Session, carts: CartRepository, products: ProductRepository):
        self.db = db
        self.carts = carts
        self.products = products

    def get_cart(self, user_id: UUID) -> CartView:
        """Cart rows with the live product price and availability joined in."""
        lines = []
        for item in self.carts.list_for_user(user_id):
            product = item.product
            unit_price = Decimal(product.price).quantize(CENTS)
            lines.append(
                CartLine(
                    id=item.id,
                    product_id=product.id,
                    title=product.title,
                    unit_price=unit_price,
                    quantity=item.quantity,
                    line_total=(unit_price * item.quantity).quantize(CENTS),
                    available_stock=product.stock_quantity,
                    is_available=product.is_active and product.stock_quantity >= item.quantity,
                )
            )

        return CartView(
            items=lines,
            item_count=sum(line.quantity for line in lines),
            total=sum((line.line_total for line in lines), Decimal("0.00")),
        )

    def add_item(self, user_id: UUID, product_id: UUID, quantity: int) -> CartView:
        """
        Add quantity of a product, merging with an existing row.

        Raises:
            ValidationError: quantity <= 0, or resulting quantity exceeds stock
            NotFound: Product missing or inactive
            Conflict: Concurrent add of the same product raced this one
        """
        if quantity is None or quantity <= 0:
            raise ValidationError("Quantity must be greater than 0", field="quantity", value=quantity)

        product = self.products.get(product_id)
        if product is None or not product.is_active:
            raise NotFound("Product not found", resource="product", resource_id=product_id)

        existing = self.carts.get_by_product(user_id, product_id)
        new_quantity = quantity + (existing.quantity if existing else 0)

        if new_quantity > product.stock_quantity:
            raise ValidationError(
                "Requested quantity exceeds available stock",
                field="quantity",
                value=new_quantity,
                details={"available_stock": product.stock_quantity},
            )

        try:
            with transaction_scope(self.db):
                if existing:
                    logger.info(
                        f"Product {product_id} already in cart of {user_id}, "
                        f"quantity {existing.quantity} -> {new_quantity}"
                    )
                    existing.quantity = new_quantity
                else:
                    self.carts.add(CartItem(user_id=user_id, product_id=product_id, quantity=new_quantity))
        except IntegrityError:
            raise Conflict("Cart was modified concurrently, please retry")

        return self.get_cart(user_id)

    def remove_item(self, user_id: UUID, item_id: UUID) -> CartView:
        """
        Raises:
            NotFound: Item missing or owned by someone else
        """
        item = self.carts.get_item(item_id)
        if item is None or item.user_id != user_id:
            raise NotFound("Cart item not found", resource="cart_item", resource_id=item_id)

        with transaction_scope(self.db):
            self.carts.delete(item)

        logger.info(f"Removed cart item {item_id} for user {user_id}")
        return self.get_cart(user_id)
