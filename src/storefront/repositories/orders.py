from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from storefront.database.models import Order


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order

    def get(self, order_id: UUID) -> Optional[Order]:
        return self.db.get(Order, order_id)

    def get_for_update(self, order_id: UUID) -> Optional[Order]:
        return (
            self.db.query(Order)
            .filter(Order.id == order_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def list_for_user(self, user_id: UUID) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(desc(Order.created_at), desc(Order.id))
            .all()
        )
