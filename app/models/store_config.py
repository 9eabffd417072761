# app/models/store_config.py
from sqlmodel import SQLModel, Field


class StoreConfig(SQLModel, table=True):
    """
    Opening hours of the shop. Single row (id=1).

    open_days uses JavaScript weekday numbers (0 = Sunday ... 6 = Saturday),
    comma separated, e.g. "2,3,4,5,6,0".
    """

    __tablename__ = "store_config"

    id: int | None = Field(default=None, primary_key=True)

    is_open: bool = Field(
        default=True,
        description="Manual switch; False closes the shop regardless of hours",
    )

    opening_time: str = Field(default="08:00", max_length=5)
    closing_time: str = Field(default="18:00", max_length=5)

    open_days: str = Field(default="2,3,4,5,6,0", max_length=20)
