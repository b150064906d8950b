# app/repositories/order_repo.py
from sqlmodel import Session, select

from app.models.order import Order, Sold


class OrderRepository:
    """
    Data access layer for orders and sold line items.

    Append-only: there is no update or delete.

    NOTE:
      - No commits here; an order is written as part of the checkout
        transaction. The unit of work is responsible for commit().
    """

    def save(self, session: Session, order: Order, sold: list[Sold]) -> Order:
        """
        Insert an Order and its Sold rows without committing.
        """
        session.add(order)
        session.flush()  # Assign PK

        for item in sold:
            item.order_id = order.id
        session.add_all(sold)
        session.flush()
        return order

    def get_by_id(self, session: Session, order_id: int) -> Order | None:
        return session.get(Order, order_id)

    def list_sold_for_order(self, session: Session, order_id: int) -> list[Sold]:
        stmt = select(Sold).where(Sold.order_id == order_id).order_by(Sold.id)
        return session.exec(stmt).all()
