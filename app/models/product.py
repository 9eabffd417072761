# app/models/product.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry (açaí cups, ice creams, drinks...).

    Build-your-own lines on the server cart point at a regular product row
    (e.g. "Açaí Personalizado") and carry their own user-chosen price in
    the cart item's selected_options.
    """

    __tablename__ = "products"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: float = Field(
        gt=0,
        description="Unit price (BRL)",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    category: str | None = Field(
        default=None,
        max_length=50,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Complement(SQLModel, table=True):
    """
    Add-on that can be chosen for a cart line (granola, condensed milk...).
    Complements do not change the line price.
    """

    __tablename__ = "complements"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100, index=True)

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
