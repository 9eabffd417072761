# app/repositories/store_config_repo.py
from sqlmodel import Session, select

from app.models.store_config import StoreConfig


class StoreConfigRepository:
    """
    Data access for the single store_config row.
    """

    def get(self, session: Session) -> StoreConfig | None:
        return session.exec(select(StoreConfig).order_by(StoreConfig.id)).first()

    def save(self, session: Session, config: StoreConfig) -> StoreConfig:
        session.add(config)
        session.commit()
        session.refresh(config)
        return config
