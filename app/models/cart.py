# app/models/cart.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Server cart entry for a user.

    Regular lines are unique per (product, complement set); custom lines
    (selected_options carrying "customAcai" / "customProduct") are always
    separate rows.
    """

    __tablename__ = "cart_items"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    complement_ids: list[int] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    # {"customAcai": {...}} | {"customProduct": {...}} | None
    selected_options: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
