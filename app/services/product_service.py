# app/services/product_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Complement, Product
from app.repositories.product_repo import ProductRepository


class ProductService:
    """
    Read-side catalog logic (products and complements).

    Catalog management screens live in the admin panel and are not part
    of this API.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category: str | None = None,
    ) -> list[Product]:
        return self.repo.list_products(
            session, skip=skip, limit=limit, only_active=only_active, category=category
        )

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def list_complements(
        self,
        session: Session,
        include_inactive: bool = False,
    ) -> list[Complement]:
        return self.repo.list_complements(session, only_active=not include_inactive)
