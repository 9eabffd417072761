# app/schemas/product.py
from datetime import datetime

from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: int
    name: str
    description: str | None = None
    price: float
    is_active: bool
    category: str | None = None
    created_at: datetime


class ComplementRead(SQLModel):
    id: int
    name: str
    is_active: bool
