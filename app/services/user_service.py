# app/services/user_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.auth import create_access_token, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import LoginResponse, UserLogin, UserRead, UserRegister, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - registration with unique email / username
      - credential check and token issuance
      - profile edits
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Auth -----

    def register(self, session: Session, payload: UserRegister) -> User:
        """
        Create a customer account (role="user").

        Raises:
            HTTPException(409): email or username already taken.
        """
        email = payload.email.lower()
        if self.repo.find_by_email(session, email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )
        if self.repo.username_taken(session, payload.username):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username already registered",
            )

        user = User(
            username=payload.username,
            email=email,
            phone=payload.phone,
            password_hash=hash_password(payload.password),
            role="user",
        )
        user = self.repo.save(session, user)
        logger.info("User %s registered", user.id)
        return user

    def login(self, session: Session, payload: UserLogin) -> LoginResponse:
        """
        Verify credentials and issue an access token.

        Raises:
            HTTPException(400): unknown email or wrong password.
        """
        user = self.repo.find_by_email(session, payload.email)
        if not user or not verify_password(payload.password, user.password_hash):
            logger.warning("Login rejected for %s", payload.email)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid credentials",
            )

        token = create_access_token(user)
        logger.info("User %s logged in", user.id)
        return LoginResponse(token=token, user=UserRead.model_validate(user))

    # ----- Self profile -----

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits (username, phone).
        """
        if payload.username is not None and payload.username != current_user.username:
            if self.repo.username_taken(session, payload.username):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Username already registered",
                )
            current_user.username = payload.username

        if payload.phone is not None:
            current_user.phone = payload.phone

        return self.repo.save(session, current_user)
