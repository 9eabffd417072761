# app/routers/products.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ComplementRead, ProductRead
from app.services.product_service import ProductService

router = APIRouter(tags=["Catalog"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("/products", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    category: str | None = None,
):
    """
    List active products.

    - Public endpoint.
    - Optional `category` filter.
    """
    return service.list_products(session, skip=skip, limit=limit, category=category)


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)


@router.get("/complements", response_model=list[ComplementRead])
def list_complements(
    session: Session = Depends(get_session),
    include_inactive: bool = False,
):
    """
    List complements (active only unless include_inactive=true).
    """
    return service.list_complements(session, include_inactive=include_inactive)
