# app/routers/store_config.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.store_config_repo import StoreConfigRepository
from app.schemas.store_config import StoreConfigRead, StoreConfigUpdate, StoreStatus
from app.services.store_service import StoreService

router = APIRouter(prefix="/store-config", tags=["Store"])

repo = StoreConfigRepository()
service = StoreService(repo)


@router.get("", response_model=StoreConfigRead)
def get_store_config(session: Session = Depends(get_session)):
    """
    Opening hours (public). Creates the default config on first access.
    """
    return service.get_config(session)


@router.get("/status", response_model=StoreStatus)
def get_store_status(session: Session = Depends(get_session)):
    """
    Whether the shop is open right now, with a reason and the next
    opening time when closed.
    """
    return service.get_status(session)


@router.put(
    "",
    response_model=StoreConfigRead,
    dependencies=[Depends(require_admin)],
)
def update_store_config(
    payload: StoreConfigUpdate,
    session: Session = Depends(get_session),
):
    """
    Update opening hours (admin only).
    """
    return service.update_config(session, payload)
