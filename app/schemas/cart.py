# app/schemas/cart.py
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.product import ProductRead


class CartItemCreate(SQLModel):
    """
    Payload for adding a catalog product to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: int
    quantity: int = Field(gt=0)
    complement_ids: list[int] = Field(default_factory=list)

    @field_validator("complement_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v: list[int] | None) -> list[int]:
        return [] if v is None else v


class CustomAcaiCreate(SQLModel):
    """
    Build-your-own açaí. The price is the value picked by the customer.
    """

    model_config = ConfigDict(extra="forbid")

    value: float = Field(gt=0)
    quantity: int = Field(gt=0)
    selected_complements: list[int] = Field(default_factory=list)
    complement_names: list[str] = Field(default_factory=list)


class CustomProductCreate(CustomAcaiCreate):
    """
    Build-your-own version of an existing catalog product
    (custom ice cream, milkshake...). `product_name` must match a product.
    """

    product_name: str = Field(max_length=100)

    @field_validator("product_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("product_name cannot be empty")
        return v


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(gt=0)


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, including total_price.
    """

    id: int
    product_id: int
    quantity: int
    complement_ids: list[int] = Field(default_factory=list)
    selected_options: dict[str, Any] | None = None
    product: ProductRead | None = None
    unit_price: float
    total_price: float
    created_at: datetime


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    cart_total: float
