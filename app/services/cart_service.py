# app/services/cart_service.py
import logging
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import get_settings
from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
    CustomAcaiCreate,
    CustomProductCreate,
)
from app.schemas.product import ProductRead

logger = logging.getLogger(__name__)

# Keys used inside CartItem.selected_options
CUSTOM_ACAI_KEY = "customAcai"
CUSTOM_PRODUCT_KEY = "customProduct"
CUSTOM_KEYS = (CUSTOM_ACAI_KEY, CUSTOM_PRODUCT_KEY)


def custom_value(selected_options: dict[str, Any] | None) -> float | None:
    """
    Return the user-chosen value of a build-your-own line, or None for
    regular catalog lines.
    """
    if not selected_options:
        return None
    for key in CUSTOM_KEYS:
        custom = selected_options.get(key)
        if custom and custom.get("value") is not None:
            return float(custom["value"])
    return None


def unit_price_for(item: CartItem, product: Product | None) -> float:
    """Custom value when present, catalog price otherwise."""
    value = custom_value(item.selected_options)
    if value is not None:
        return value
    return product.price if product is not None else 0.0


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - validate complements
      - merge regular lines by (product, complement set)
      - keep build-your-own lines separate, priced by their own value
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: int) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is inactive",
            )
        return product

    def _get_product_by_name(self, session: Session, name: str, detail: str) -> Product:
        product = self.product_repo.get_by_name(session, name)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
        return product

    def _validate_complements(self, session: Session, complement_ids: list[int]) -> None:
        if not complement_ids:
            return
        wanted = set(complement_ids)
        found = {
            c.id
            for c in self.product_repo.get_complements_by_ids(session, list(wanted))
            if c.is_active
        }
        missing = sorted(wanted - found)
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown or inactive complements: {missing}",
            )

    def _find_mergeable(
        self,
        session: Session,
        user_id: int,
        product_id: int,
        complement_ids: list[int],
    ) -> CartItem | None:
        """Regular (non-custom) line with the same product and complement multiset."""
        for item in self.cart_repo.list_for_product(session, user_id, product_id):
            if custom_value(item.selected_options) is not None:
                continue
            if sorted(item.complement_ids or []) == complement_ids:
                return item
        return None

    # ---- public operations ----

    def get_cart_summary(self, session: Session, user_id: int) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with unit_price and total_price)
          - total_quantity
          - cart_total
        """
        items = self.cart_repo.list_for_user(session, user_id)

        item_reads: list[CartItemRead] = []
        total_qty = 0
        cart_total = 0.0

        for it in items:
            product = self.product_repo.get_by_id(session, it.product_id)
            unit_price = unit_price_for(it, product)
            total_price = round(it.quantity * unit_price, 2)
            total_qty += it.quantity
            cart_total += total_price

            item_reads.append(
                CartItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    complement_ids=list(it.complement_ids or []),
                    selected_options=it.selected_options,
                    product=ProductRead.model_validate(product) if product else None,
                    unit_price=unit_price,
                    total_price=total_price,
                    created_at=it.created_at,
                )
            )

        return CartSummary(
            items=item_reads,
            total_quantity=total_qty,
            cart_total=round(cart_total, 2),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: int,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a catalog product to the user's cart.

        Rules:
          - product must exist and be active
          - complements must exist and be active
          - same product + same complements (any order) => increment quantity
        """
        self._get_valid_product(session, payload.product_id)
        complement_ids = sorted(payload.complement_ids)
        self._validate_complements(session, complement_ids)

        existing = self._find_mergeable(session, user_id, payload.product_id, complement_ids)

        if existing:
            existing.quantity += payload.quantity
            self.cart_repo.save(session, existing)
            logger.info(
                "Cart item %s quantity increased to %s (user %s)",
                existing.id, existing.quantity, user_id,
            )
        else:
            item = CartItem(
                user_id=user_id,
                product_id=payload.product_id,
                quantity=payload.quantity,
                complement_ids=complement_ids,
            )
            item = self.cart_repo.save(session, item)
            logger.info("Cart item %s added (user %s)", item.id, user_id)

        return self.get_cart_summary(session, user_id)

    def add_custom_acai(
        self,
        session: Session,
        user_id: int,
        payload: CustomAcaiCreate,
    ) -> CartSummary:
        """
        Add a build-your-own açaí. Every custom açaí is a new line,
        attached to the catalog product named CUSTOM_ACAI_PRODUCT_NAME.
        """
        product = self._get_product_by_name(
            session,
            get_settings().CUSTOM_ACAI_PRODUCT_NAME,
            "Custom açaí product not found",
        )
        self._validate_complements(session, payload.selected_complements)

        item = CartItem(
            user_id=user_id,
            product_id=product.id,
            quantity=payload.quantity,
            complement_ids=sorted(payload.selected_complements),
            selected_options={
                CUSTOM_ACAI_KEY: {
                    "value": payload.value,
                    "selectedComplements": list(payload.selected_complements),
                    "complementNames": list(payload.complement_names),
                }
            },
        )
        item = self.cart_repo.save(session, item)
        logger.info(
            "Custom açaí %s added at %.2f (user %s)", item.id, payload.value, user_id
        )
        return self.get_cart_summary(session, user_id)

    def add_custom_product(
        self,
        session: Session,
        user_id: int,
        payload: CustomProductCreate,
    ) -> CartSummary:
        """
        Add a build-your-own version of a catalog product (looked up by name).
        Always a new line.
        """
        product = self._get_product_by_name(
            session, payload.product_name, "Custom product not found"
        )
        self._validate_complements(session, payload.selected_complements)

        item = CartItem(
            user_id=user_id,
            product_id=product.id,
            quantity=payload.quantity,
            complement_ids=sorted(payload.selected_complements),
            selected_options={
                CUSTOM_PRODUCT_KEY: {
                    "name": product.name,
                    "value": payload.value,
                    "selectedComplements": list(payload.selected_complements),
                    "complementNames": list(payload.complement_names),
                }
            },
        )
        item = self.cart_repo.save(session, item)
        logger.info("Custom product %s added (user %s)", item.id, user_id)
        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: int,
        item_id: int,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Update the quantity of a cart line owned by the user.
        """
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )

        item.quantity = payload.quantity
        self.cart_repo.save(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: int,
        item_id: int,
    ) -> CartSummary:
        """
        Remove a line from the cart and return updated summary.
        """
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(self, session: Session, user_id: int) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        logger.info("Cart cleared (user %s)", user_id)
        return CartSummary(items=[], total_quantity=0, cart_total=0.0)
