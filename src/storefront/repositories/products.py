from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import asc, desc, update
from sqlalchemy.orm import Session

from storefront.database.models import Product, ProductStatus
from storefront.domain.schemas import ProductFilters


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


SORT_FIELDS = {
    "created_at": Product.created_at,
    "price": Product.price,
    "title": Product.title,
}


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: UUID) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def lock_many(self, product_ids: Sequence[UUID]) -> List[Product]:
        """
        SELECT ... FOR UPDATE over the given products.

        Rows are locked in id order so concurrent checkouts touching the
        same products cannot deadlock each other.
        """
        return (
            self.db.query(Product)
            .filter(Product.id.in_(list(product_ids)))
            .order_by(Product.id)
            .with_for_update()
            .populate_existing()
            .all()
        )

    def search(self, filters: ProductFilters, page: int, page_size: int) -> Tuple[List[Product], int]:
        query = self.db.query(Product).filter(Product.status == ProductStatus.ACTIVE)

        if filters.search:
            query = query.filter(Product.title.ilike(f"%{escape_like(filters.search)}%", escape="\\"))
        if filters.min_price is not None:
            query = query.filter(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Product.price <= filters.max_price)
        if filters.seller_id is not None:
            query = query.filter(Product.seller_id == filters.seller_id)
        if filters.in_stock:
            query = query.filter(Product.stock_quantity > 0)

        total = query.count()

        sort_field = SORT_FIELDS.get(filters.sort_by, Product.created_at)
        order = desc if filters.sort_order == "desc" else asc
        items = (
            query.order_by(order(sort_field), Product.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return items, total

    def list_by_seller(self, seller_id: UUID) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.seller_id == seller_id)
            .order_by(desc(Product.created_at))
            .all()
        )

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def decrement_stock(self, product_id: UUID, quantity: int) -> bool:
        """
        Conditionally take quantity units out of stock.

        The WHERE clause makes the check and the decrement one statement, so
        stock never goes below zero even without row locks.
        """
        result = self.db.execute(
            update(Product)
            .where(
                Product.id == product_id,
                Product.status == ProductStatus.ACTIVE,
                Product.stock_quantity >= quantity,
            )
            .values(
                stock_quantity=Product.stock_quantity - quantity,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_stock(self, product_id: UUID, quantity: int) -> bool:
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(
                stock_quantity=Product.stock_quantity + quantity,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
