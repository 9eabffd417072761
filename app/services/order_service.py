# app/services/order_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import CartItem
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderWithItemsRead,
)
from app.services.cart_service import unit_price_for
from app.services.store_service import StoreService

logger = logging.getLogger(__name__)

# Payment methods that skip the "waiting for payment" step
PREPARE_IMMEDIATELY = {"CREDIT_CARD", "CASH_ON_DELIVERY"}

# Orders in these states can no longer be canceled
NON_CANCELABLE = {"on_the_way", "delivered", "canceled"}


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart (store must be open)
      - Validate cart items against products (exists, active)
      - Compute subtotal, delivery fee and total
      - Clear cart in the same transaction
      - Customer-side cancellation
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        store_service: StoreService,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.store_service = store_service

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user: User,
        payload: OrderCreate,
        now: datetime | None = None,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Refuse when the store is closed.
          2. Load cart items; error if empty.
          3. Ensure every product exists & is active.
          4. Compute subtotal (custom value for build-your-own lines) and total.
          5. Create Order row (status depends on payment method).
          6. Create OrderItem rows based on cart.
          7. Clear cart.
          8. Commit transaction and return full order.
        """
        # 1) Store hours
        store_status = self.store_service.get_status(session, now)
        if not store_status.is_open:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=store_status.reason or "The store is closed",
            )

        # 2) Load cart
        cart_items: list[CartItem] = self.cart_repo.list_for_user(session, user.id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 3) Validate each cart item vs product
        errors: list[dict[str, str]] = []
        product_map: dict[int, Product] = {}

        for ci in cart_items:
            product = self.product_repo.get_by_id(session, ci.product_id)

            if not product:
                errors.append({"product_id": str(ci.product_id), "reason": "Product not found"})
                continue

            if not product.is_active:
                errors.append({"product_id": str(ci.product_id), "reason": "Product is inactive"})
                continue

            product_map[ci.product_id] = product

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 4) Subtotal and total
        unit_prices = {
            ci.id: unit_price_for(ci, product_map[ci.product_id]) for ci in cart_items
        }
        subtotal = round(sum(ci.quantity * unit_prices[ci.id] for ci in cart_items), 2)
        delivery_fee = payload.delivery_fee if payload.delivery_type == "delivery" else 0.0
        total_price = round(subtotal + delivery_fee, 2)

        # 5) Create the Order
        initial_status = (
            "being_prepared"
            if payload.payment_method in PREPARE_IMMEDIATELY
            else "pending_payment"
        )
        is_delivery = payload.delivery_type == "delivery"
        order = Order(
            user_id=user.id,
            status=initial_status,
            payment_method=payload.payment_method,
            delivery_type=payload.delivery_type,
            delivery_fee=delivery_fee,
            subtotal=subtotal,
            total_price=total_price,
            shipping_street=payload.shipping_street if is_delivery else None,
            shipping_number=payload.shipping_number if is_delivery else None,
            shipping_complement=payload.shipping_complement if is_delivery else None,
            shipping_neighborhood=payload.shipping_neighborhood if is_delivery else None,
            shipping_phone=payload.shipping_phone or user.phone,
        )
        # 6) Freeze cart lines into OrderItem rows
        order_items = [
            OrderItem(
                product_id=ci.product_id,
                quantity=ci.quantity,
                price_at_order=unit_prices[ci.id],
                complement_ids=list(ci.complement_ids or []),
                selected_options=ci.selected_options,
            )
            for ci in cart_items
        ]
        order, order_items = self.order_repo.add_with_items(session, order, order_items)

        # 7) Clear cart
        for ci in cart_items:
            session.delete(ci)

        # 8) Commit transaction
        session.commit()
        session.refresh(order)

        logger.info(
            "Order %s created for user %s: %s items, total %.2f (%s)",
            order.id, user.id, len(order_items), total_price, payload.delivery_type,
        )
        return self._build_order_with_items_dto(order, order_items)

    def list_user_orders(
        self,
        session: Session,
        user_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user (without items).
        """
        orders = self.order_repo.history(session, user_id, skip, limit)
        return orders  # type: ignore[return-value]

    def get_user_order(
        self,
        session: Session,
        user_id: int,
        order_id: int,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get(session, order_id)
        if not order or order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.items_of(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def cancel_order(
        self,
        session: Session,
        user: User,
        order_id: int,
    ) -> OrderRead:
        """
        Cancel an order.

          - owner or admin only (403 otherwise)
          - refused once the order is on the way, delivered or canceled
        """
        order = self.order_repo.get(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if order.user_id != user.id and user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not allowed to cancel this order",
            )

        if order.status in NON_CANCELABLE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Cannot cancel an order with status "{order.status}"',
            )

        order.status = "canceled"
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.save(session, order)
        session.commit()
        session.refresh(order)
        logger.info("Order %s canceled by user %s", order.id, user.id)
        return order  # type: ignore[return-value]

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models.
        """
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                quantity=it.quantity,
                price_at_order=it.price_at_order,
                line_total=round(it.quantity * it.price_at_order, 2),
                complement_ids=list(it.complement_ids or []),
                selected_options=it.selected_options,
            )
            for it in items
        ]

        return OrderWithItemsRead(
            **OrderRead.model_validate(order).model_dump(),
            items=item_dtos,
        )
