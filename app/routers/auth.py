# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import LoginResponse, UserLogin, UserRead, UserRegister, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserRegister,
    session: Session = Depends(get_session),
):
    """
    Create a customer account.

    - 409 if email or username is already taken.
    """
    return service.register(session, payload)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: UserLogin,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for an access token.

    - 400 on invalid credentials.
    """
    return service.login(session, payload)


@router.get("/profile", response_model=UserRead)
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires valid bearer token.
    """
    return service.get_me(current_user)


@router.patch("/profile", response_model=UserRead)
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).
    """
    return service.update_me(session, current_user, payload)
