# app/repositories/order_repo.py
from sqlmodel import Session, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Orders and their frozen line items.

    Nothing here commits: checkout writes the order, its items and the
    cart deletion in one transaction owned by OrderService.
    """

    def history(
        self,
        session: Session,
        user_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """Newest first; id breaks ties between orders placed in the same instant."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def get(self, session: Session, order_id: int) -> Order | None:
        return session.get(Order, order_id)

    def items_of(self, session: Session, order_id: int) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        return session.exec(stmt).all()

    def add_with_items(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Stage an order plus its items. The order is flushed first so the
        items can point at its id.
        """
        session.add(order)
        session.flush()
        for item in items:
            item.order_id = order.id
        session.add_all(items)
        session.flush()
        return order, items

    def save(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order
