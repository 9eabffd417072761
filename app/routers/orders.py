# app/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth, require_user
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.store_config_repo import StoreConfigRepository
from app.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderWithItemsRead,
)
from app.services.order_service import OrderService
from app.services.store_service import StoreService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
store_service = StoreService(StoreConfigRepository())
service = OrderService(order_repo, cart_repo, product_repo, store_service)


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Create an order from the current user's cart.

    Auth:
      - Only role='user' (customer) can checkout.
    """
    return service.create_order_from_cart(session, current_user, payload)


@router.get("/history", response_model=list[OrderRead])
def order_history(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders (without items), newest first.
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_my_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)


@router.put("/cancel/{order_id}", response_model=OrderRead)
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Cancel an order (owner or admin).

    Not allowed once the order is on_the_way, delivered or canceled.
    """
    return service.cancel_order(session, current_user, order_id)
