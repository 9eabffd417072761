# app/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Customer or staff account.

    Role:
      - "user" | "admin"
      - "guest" is represented by the absence of a token; guests never
        get a row here, their cart lives on the client.

    Only the bcrypt hash of the password is stored.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
        index=True,
    )

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Display / login name",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email",
    )

    phone: str | None = Field(
        default=None,
        max_length=20,
        description="Contact phone used for delivery",
    )

    password_hash: str = Field(
        description="bcrypt hash of the password",
    )

    # Application role
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
