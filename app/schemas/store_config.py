# app/schemas/store_config.py
import re

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class StoreConfigRead(SQLModel):
    id: int
    is_open: bool
    opening_time: str
    closing_time: str
    open_days: str


class StoreConfigUpdate(SQLModel):
    """
    Admin payload to change opening hours. All fields optional.
    """

    model_config = ConfigDict(extra="forbid")

    is_open: bool | None = None
    opening_time: str | None = None
    closing_time: str | None = None
    open_days: str | None = None

    @field_validator("opening_time", "closing_time")
    @classmethod
    def valid_time(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not _TIME_RE.match(v):
            raise ValueError("time must be HH:MM (00:00-23:59)")
        return v

    @field_validator("open_days")
    @classmethod
    def valid_days(cls, v: str | None) -> str | None:
        if v is None:
            return v
        days = [d.strip() for d in v.split(",") if d.strip()]
        if any(d not in {"0", "1", "2", "3", "4", "5", "6"} for d in days):
            raise ValueError("open_days must be comma separated numbers 0-6 (0 = Sunday)")
        return ",".join(days)


class StoreStatus(SQLModel):
    """
    Computed open/closed state.
    """

    is_open: bool
    reason: str | None = None
    next_open_time: str | None = None
