# app/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_user
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartSummary,
    CustomAcaiCreate,
    CustomProductCreate,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get current user's cart summary.

    Auth:
      - Only role='user' (customer) can access.
      - Admins are forbidden.
    """
    return service.get_cart_summary(session, current_user.id)


@router.post("/add", response_model=CartSummary, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add a catalog product (with optional complements) to the cart.

    Same product with the same complements increments the existing line.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.post(
    "/add-custom-acai",
    response_model=CartSummary,
    status_code=status.HTTP_201_CREATED,
)
def add_custom_acai(
    payload: CustomAcaiCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add a build-your-own açaí priced at the chosen value.
    """
    return service.add_custom_acai(session, current_user.id, payload)


@router.post(
    "/add-custom-product",
    response_model=CartSummary,
    status_code=status.HTTP_201_CREATED,
)
def add_custom_product(
    payload: CustomProductCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add a build-your-own version of a catalog product.
    """
    return service.add_custom_product(session, current_user.id, payload)


@router.put("/update/{item_id}", response_model=CartSummary)
def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Update quantity of a cart line.

    Returns the updated cart summary.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        item_id=item_id,
        payload=payload,
    )


@router.delete("/remove/{item_id}", response_model=CartSummary)
def remove_cart_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Remove a line from the cart.

    Returns the updated cart summary.
    """
    return service.remove_item(session, current_user.id, item_id)


@router.delete("/clear", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    return service.clear_cart(session, current_user.id)
