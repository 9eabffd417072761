# app/repositories/product_repo.py
from sqlmodel import Session, select

from app.models.product import Complement, Product


class ProductRepository:
    """
    Data access layer for Product & Complement.

    - Pure DB operations (queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def get_by_name(self, session: Session, name: str) -> Product | None:
        stmt = select(Product).where(Product.name == name)
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(Product.name).offset(skip).limit(limit)
        return session.exec(stmt).all()

    # ----- Complements -----

    def list_complements(
        self,
        session: Session,
        only_active: bool = True,
    ) -> list[Complement]:
        stmt = select(Complement)
        if only_active:
            stmt = stmt.where(Complement.is_active == True)  # noqa: E712
        return session.exec(stmt.order_by(Complement.name)).all()

    def get_complements_by_ids(
        self,
        session: Session,
        complement_ids: list[int],
    ) -> list[Complement]:
        if not complement_ids:
            return []
        stmt = select(Complement).where(Complement.id.in_(complement_ids))
        return session.exec(stmt).all()
