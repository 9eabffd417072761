# app/client/storefront.py
from dataclasses import dataclass

import httpx

from app.client.api import StorefrontAPI
from app.client.cart_store import CartStore
from app.client.config import ClientSettings, get_client_settings
from app.client.reconciler import Reconciler
from app.client.session import Session
from app.client.storage import LocalStorage


@dataclass
class Storefront:
    """
    The wired-up client: one storage, one API client, one session, one
    cart store and the reconciler that links them.
    """

    storage: LocalStorage
    api: StorefrontAPI
    session: Session
    cart: CartStore
    reconciler: Reconciler

    @classmethod
    def create(
        cls,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        storage: LocalStorage | None = None,
    ) -> "Storefront":
        settings = settings or get_client_settings()
        storage = storage or LocalStorage(settings.STORAGE_PATH)
        api = StorefrontAPI(settings.API_BASE_URL, transport=transport)
        session = Session(api, storage)
        cart = CartStore(session, storage, api, settings.CUSTOM_ACAI_NAME)
        reconciler = Reconciler(session, cart, api)
        return cls(storage, api, session, cart, reconciler)

    async def start(self) -> None:
        """
        Restore the session. A restored sign-in triggers reconciliation
        through the session listener; a guest just loads the local cart.
        """
        await self.session.initialize()
        if not self.session.is_authenticated:
            await self.cart.load()

    async def aclose(self) -> None:
        self.reconciler.close()
        await self.api.aclose()
