# app/services/store_service.py
from datetime import datetime

from sqlmodel import Session

from app.models.store_config import StoreConfig
from app.repositories.store_config_repo import StoreConfigRepository
from app.schemas.store_config import StoreConfigUpdate, StoreStatus

DEFAULT_OPENING_TIME = "08:00"
DEFAULT_CLOSING_TIME = "18:00"
DEFAULT_OPEN_DAYS = "2,3,4,5,6,0"

# Indexed by JavaScript weekday number (0 = Sunday)
DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def js_weekday(moment: datetime) -> int:
    """Python's Monday=0 mapped to the stored Sunday=0 convention."""
    return (moment.weekday() + 1) % 7


def is_time_in_range(current: str, opening: str, closing: str) -> bool:
    """
    Inclusive on both ends. A closing time earlier than the opening time
    means the shop closes after midnight (e.g. 18:00 to 02:00).
    """
    now = time_to_minutes(current)
    start = time_to_minutes(opening)
    end = time_to_minutes(closing)

    if end < start:
        return now >= start or now <= end
    return start <= now <= end


def parse_open_days(open_days: str | None) -> list[int]:
    if not open_days:
        return []
    return [int(d) for d in open_days.split(",") if d.strip()]


def _next_open_day(open_days: list[int], today: int, opening_time: str) -> str:
    for offset in range(1, 8):
        day = (today + offset) % 7
        if day in open_days:
            return f"Next opening: {DAY_NAMES[day]} at {opening_time}"
    return "Check the opening days"


def _next_open_time(opening_time: str, current: str) -> str:
    if time_to_minutes(current) < time_to_minutes(opening_time):
        return f"Opens today at {opening_time}"
    return f"Opens tomorrow at {opening_time}"


def check_store_status(config: StoreConfig, now: datetime) -> StoreStatus:
    """
    Decide whether the shop is open at `now`.

    Order of checks:
      1. manual switch (is_open=False) closes the shop
      2. today must be one of open_days
      3. current HH:MM must be inside [opening_time, closing_time]
    """
    if not config.is_open:
        return StoreStatus(is_open=False, reason="The store is temporarily closed.")

    today = js_weekday(now)
    current = now.strftime("%H:%M")
    open_days = parse_open_days(config.open_days)

    if today not in open_days:
        return StoreStatus(
            is_open=False,
            reason="The store does not open today.",
            next_open_time=_next_open_day(open_days, today, config.opening_time),
        )

    if config.opening_time and config.closing_time:
        if not is_time_in_range(current, config.opening_time, config.closing_time):
            return StoreStatus(
                is_open=False,
                reason=(
                    f"Outside opening hours "
                    f"({config.opening_time} to {config.closing_time})."
                ),
                next_open_time=_next_open_time(config.opening_time, current),
            )

    return StoreStatus(is_open=True)


class StoreService:
    """
    Opening-hours configuration and open/closed computation.
    """

    def __init__(self, repo: StoreConfigRepository):
        self.repo = repo

    def get_config(self, session: Session) -> StoreConfig:
        """
        Return the store config, creating the default row on first access.
        """
        config = self.repo.get(session)
        if config is None:
            config = self.repo.save(
                session,
                StoreConfig(
                    is_open=True,
                    opening_time=DEFAULT_OPENING_TIME,
                    closing_time=DEFAULT_CLOSING_TIME,
                    open_days=DEFAULT_OPEN_DAYS,
                ),
            )
        return config

    def update_config(self, session: Session, payload: StoreConfigUpdate) -> StoreConfig:
        config = self.get_config(session)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(config, field, value)
        return self.repo.save(session, config)

    def get_status(self, session: Session, now: datetime | None = None) -> StoreStatus:
        config = self.get_config(session)
        return check_store_status(config, now or datetime.now())
