# app/schemas/order.py
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

PaymentMethod = Literal["PIX", "CREDIT_CARD", "CASH_ON_DELIVERY"]
DeliveryType = Literal["delivery", "pickup"]
OrderStatus = Literal[
    "pending_payment",
    "being_prepared",
    "ready_for_pickup",
    "on_the_way",
    "delivered",
    "canceled",
]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - payment method
      - delivery type (delivery | pickup) and delivery fee
      - shipping address (delivery only)

    Backend derives:
      - user_id from token
      - status from the payment method
      - subtotal / total_price from the cart
      - items from the cart
    """

    model_config = ConfigDict(extra="forbid")

    payment_method: PaymentMethod
    delivery_type: DeliveryType = "delivery"
    delivery_fee: float = Field(default=0.0, ge=0)

    shipping_street: str | None = None
    shipping_number: str | None = None
    shipping_complement: str | None = None
    shipping_neighborhood: str | None = None
    shipping_phone: str | None = None

    @field_validator(
        "shipping_street",
        "shipping_number",
        "shipping_complement",
        "shipping_neighborhood",
        "shipping_phone",
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def require_address_for_delivery(self) -> "OrderCreate":
        if self.delivery_type == "delivery":
            missing = [
                name
                for name in ("shipping_street", "shipping_number", "shipping_neighborhood")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(
                    "delivery orders need a shipping address: missing " + ", ".join(missing)
                )
        return self


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: int
    order_id: int
    product_id: int
    quantity: int
    price_at_order: float
    line_total: float
    complement_ids: list[int] = Field(default_factory=list)
    selected_options: dict[str, Any] | None = None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: int
    user_id: int
    status: OrderStatus
    payment_method: PaymentMethod
    delivery_type: DeliveryType
    delivery_fee: float
    subtotal: float
    total_price: float
    shipping_street: str | None
    shipping_number: str | None
    shipping_complement: str | None
    shipping_neighborhood: str | None
    shipping_phone: str | None
    created_at: datetime
    updated_at: datetime


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]
