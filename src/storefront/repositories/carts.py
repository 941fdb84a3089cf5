from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.orm import Session

from storefront.database.models import CartItem


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: UUID) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.created_at, CartItem.id)
            .all()
        )

    def get_item(self, item_id: UUID) -> Optional[CartItem]:
        return self.db.get(CartItem, item_id)

    def get_by_product(self, user_id: UUID, product_id: UUID) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .first()
        )

    def add(self, item: CartItem) -> CartItem:
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: CartItem) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear(self, user_id: UUID) -> int:
        result = self.db.execute(
            delete(CartItem)
            .where(CartItem.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
