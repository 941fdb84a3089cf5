"""
Unit tests for CartService
"""
from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.database.models import ProductStatus
from storefront.utils.exceptions import NotFound, ValidationError


class TestCart:

    def test_empty_cart(self, cart_service, buyer):
        cart = cart_service.get_cart(buyer.id)

        assert cart.items == []
        assert cart.item_count == 0
        assert cart.total == Decimal("0.00")

    def test_add_item(self, cart_service, buyer, product):
        cart = cart_service.add_item(buyer.id, product.id, 2)

        assert len(cart.items) == 1
        line = cart.items[0]
        assert line.product_id == product.id
        assert line.title == "Desk Lamp"
        assert line.quantity == 2
        assert line.unit_price == Decimal("19.99")
        assert line.line_total == Decimal("39.98")
        assert line.is_available is True
        assert cart.total == Decimal("39.98")

    def test_adding_same_product_increments(self, cart_service, buyer, product):
        cart_service.add_item(buyer.id, product.id, 2)
        cart = cart_service.add_item(buyer.id, product.id, 3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.item_count == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, cart_service, buyer, product, quantity):
        with pytest.raises(ValidationError):
            cart_service.add_item(buyer.id, product.id, quantity)

    def test_quantity_above_stock(self, cart_service, buyer, product):
        with pytest.raises(ValidationError) as exc_info:
            cart_service.add_item(buyer.id, product.id, 11)

        assert exc_info.value.details["available_stock"] == 10

    def test_incremented_quantity_above_stock(self, cart_service, buyer, product):
        cart_service.add_item(buyer.id, product.id, 8)

        with pytest.raises(ValidationError):
            cart_service.add_item(buyer.id, product.id, 3)

        assert cart_service.get_cart(buyer.id).items[0].quantity == 8

    def test_unknown_product(self, cart_service, buyer):
        with pytest.raises(NotFound):
            cart_service.add_item(buyer.id, uuid4(), 1)

    def test_inactive_product(self, cart_service, buyer, seller, product_factory):
        hidden = product_factory(seller, status=ProductStatus.INACTIVE)

        with pytest.raises(NotFound):
            cart_service.add_item(buyer.id, hidden.id, 1)

    def test_cart_reflects_live_price_and_stock(self, cart_service, db_session, buyer, product):
        cart_service.add_item(buyer.id, product.id, 4)
        product.price = Decimal("10.00")
        product.stock_quantity = 3
        db_session.commit()

        line = cart_service.get_cart(buyer.id).items[0]

        assert line.unit_price == Decimal("10.00")
        assert line.line_total == Decimal("40.00")
        assert line.available_stock == 3
        assert line.is_available is False

    def test_remove_item(self, cart_service, buyer, product):
        item_id = cart_service.add_item(buyer.id, product.id, 1).items[0].id

        cart = cart_service.remove_item(buyer.id, item_id)

        assert cart.items == []

    def test_remove_foreign_item(self, cart_service, buyer, other_buyer, product):
        item_id = cart_service.add_item(buyer.id, product.id, 1).items[0].id

        with pytest.raises(NotFound):
            cart_service.remove_item(other_buyer.id, item_id)

        assert len(cart_service.get_cart(buyer.id).items) == 1

    def test_remove_missing_item(self, cart_service, buyer):
        with pytest.raises(NotFound):
            cart_service.remove_item(buyer.id, uuid4())

    def test_carts_are_per_user(self, cart_service, buyer, other_buyer, product):
        cart_service.add_item(buyer.id, product.id, 1)

        assert cart_service.get_cart(other_buyer.id).items == []
