# app/repositories/cart_repo.py
from sqlmodel import Session, select
from app.models.cart import CartItem


class CartRepository:

    # Get items for a user, oldest first
    def list_for_user(self, session: Session, user_id: int) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        return session.exec(stmt).all()

    def list_for_product(
        self, session: Session, user_id: int, product_id: int
    ) -> list[CartItem]:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).all()

    def get_for_user(
        self, session: Session, user_id: int, item_id: int
    ) -> CartItem | None:
        item = session.get(CartItem, item_id)
        if item is None or item.user_id != user_id:
            return None
        return item

    # Insert or update one line
    def save(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: int) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()
