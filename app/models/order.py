# app/models/order.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, created from the server cart at checkout.

    Shipping fields are a snapshot of the address at order time and stay
    empty for pickup orders.
    """

    __tablename__ = "orders"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    # pending_payment | being_prepared | ready_for_pickup | on_the_way
    # | delivered | canceled
    status: str = Field(
        default="pending_payment",
        index=True,
        description="Order status lifecycle",
    )

    # PIX | CREDIT_CARD | CASH_ON_DELIVERY
    payment_method: str

    # delivery | pickup
    delivery_type: str = Field(default="delivery")

    delivery_fee: float = Field(default=0.0, ge=0)

    subtotal: float = Field(
        description="Sum of line totals",
    )

    total_price: float = Field(
        description="Subtotal plus delivery fee",
    )

    shipping_street: str | None = None
    shipping_number: str | None = None
    shipping_complement: str | None = None
    shipping_neighborhood: str | None = None
    shipping_phone: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.
    """

    __tablename__ = "order_items"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    order_id: int = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    # Custom value for build-your-own lines, catalog price otherwise
    price_at_order: float = Field(
        description="Unit price at time of order",
    )

    complement_ids: list[int] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    selected_options: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )
