# app/client/models.py
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

LineType = Literal["product", "custom_acai", "custom_product"]

# selected_options keys used by the backend for build-your-own lines
_SERVER_CUSTOM_KEYS: dict[str, LineType] = {
    "customAcai": "custom_acai",
    "customProduct": "custom_product",
}


class ProductInfo(BaseModel):
    """
    Catalog product as returned by GET /products/{id}.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    price: float
    description: str | None = None
    category: str | None = None
    is_active: bool = True


class ComplementInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    is_active: bool = True


class CustomPayload(BaseModel):
    """
    Snapshot of a build-your-own item: the price the customer picked and
    the complements they chose.
    """

    model_config = ConfigDict(extra="ignore")

    value: float = Field(gt=0)
    complement_names: list[str] = Field(default_factory=list)
    selected_complements: list[int] = Field(default_factory=list)


class CartLine(BaseModel):
    """
    One line of the cart, for both guest and server carts.

    Guest lines use string ids ("guest-<ns>"); server lines keep the
    backend's integer ids. unit_price / total_price are derived and get
    recomputed by app.client.pricing.reprice after every change.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str
    product_id: int | None = None
    quantity: int = Field(gt=0)
    complement_ids: list[int] | None = None
    type: LineType = "product"
    product: ProductInfo | None = None
    product_name: str | None = None
    custom_payload: CustomPayload | None = None
    unit_price: float = 0.0
    total_price: float = 0.0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_custom(self) -> bool:
        return self.type != "product"

    @property
    def display_name(self) -> str:
        if self.product_name:
            return self.product_name
        if self.product is not None:
            return self.product.name
        return "Custom açaí" if self.type == "custom_acai" else "Item"

    @classmethod
    def from_server(cls, data: dict[str, Any]) -> "CartLine":
        """
        Build a line from one entry of GET /cart `items`.
        """
        options = data.get("selected_options") or {}
        line_type: LineType = "product"
        payload = None
        for key, kind in _SERVER_CUSTOM_KEYS.items():
            custom = options.get(key)
            if custom:
                line_type = kind
                payload = CustomPayload(
                    value=custom["value"],
                    complement_names=custom.get("complementNames") or [],
                    selected_complements=custom.get("selectedComplements") or [],
                )
                break

        product = data.get("product")
        return cls(
            id=data["id"],
            product_id=data.get("product_id"),
            quantity=data["quantity"],
            complement_ids=data.get("complement_ids") or None,
            type=line_type,
            product=ProductInfo.model_validate(product) if product else None,
            product_name=(product or {}).get("name"),
            custom_payload=payload,
            unit_price=data.get("unit_price", 0.0),
            total_price=data.get("total_price", 0.0),
            created_at=data["created_at"],
        )


class CartSnapshot(BaseModel):
    """Items plus their derived total."""

    items: list[CartLine] = Field(default_factory=list)
    total: float = 0.0


class UserProfile(BaseModel):
    """Profile returned by GET /auth/profile, persisted under the "user" key."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    email: str
    phone: str | None = None
    role: str = "user"


class LoginResult(BaseModel):
    token: str
    user: UserProfile
