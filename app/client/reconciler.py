# app/client/reconciler.py
import logging
from dataclasses import dataclass, field

from app.client.api import StorefrontAPI
from app.client.cart_store import CartStore
from app.client.exceptions import ApiError, StorageError
from app.client.models import UserProfile
from app.client.session import Session

logger = logging.getLogger(__name__)


@dataclass
class SyncFailure:
    line_id: int | str
    product_id: int | None
    error: str


@dataclass
class ReconcileReport:
    """Outcome of merging the guest cart into the server cart."""

    synced: list[int | str] = field(default_factory=list)
    skipped: list[int | str] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Reconciler:
    """
    Keeps the cart consistent with the signed-in identity.

    On sign-in the guest cart is pushed to the server one line at a time
    (custom lines have no catalog product and are skipped), the guest cart
    is deleted, and the store reloads from the server. One failing line
    does not stop the others. On sign-out the store is reset.
    """

    def __init__(self, session: Session, store: CartStore, api: StorefrontAPI):
        self.session = session
        self.store = store
        self.api = api
        self.last_report: ReconcileReport | None = None
        self._unsubscribe = session.subscribe(self.on_identity_change)

    def close(self) -> None:
        self._unsubscribe()

    async def on_identity_change(
        self,
        previous: UserProfile | None,
        current: UserProfile | None,
    ) -> None:
        if current is None:
            self.store.reset()
            return
        if previous is not None:
            # account switch without sign-out
            self.store.reset()
        await self.reconcile()

    async def reconcile(self) -> ReconcileReport:
        report = ReconcileReport()
        lines = self.store.local.read_lines()

        for line in lines:
            if line.product_id is None:
                report.skipped.append(line.id)
                continue
            try:
                await self.api.add_to_cart(line.product_id, line.quantity, line.complement_ids)
            except ApiError as e:
                logger.warning(
                    "Could not sync guest line %s (product %s): %s",
                    line.id,
                    line.product_id,
                    e.message,
                )
                report.failures.append(SyncFailure(line.id, line.product_id, e.message))
            else:
                report.synced.append(line.id)

        if lines:
            try:
                self.store.local.delete()
            except StorageError as e:
                logger.error("Could not delete guest cart after sync: %s", e)
            logger.info(
                "Guest cart merged: %d synced, %d skipped, %d failed",
                len(report.synced),
                len(report.skipped),
                len(report.failures),
            )

        await self.store.load()
        self.last_report = report
        return report
