# app/client/cart_store.py
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from pydantic import TypeAdapter, ValidationError

from app.client.api import StorefrontAPI
from app.client.config import get_client_settings
from app.client.exceptions import ApiError, AuthenticationError, CartOperationError
from app.client.models import CartLine, CartSnapshot, CustomPayload, ProductInfo
from app.client.pricing import cart_total, reprice, same_line
from app.client.session import Session
from app.client.storage import LocalStorage

logger = logging.getLogger(__name__)

GUEST_CART_KEY = "guest_cart"

_LINES = TypeAdapter(list[CartLine])


def _snapshot(lines: list[CartLine]) -> CartSnapshot:
    return CartSnapshot(items=lines, total=cart_total(lines))


def _new_guest_id(lines: list[CartLine]) -> str:
    taken = {str(line.id) for line in lines}
    stamp = time.time_ns()
    while f"guest-{stamp}" in taken:
        stamp += 1
    return f"guest-{stamp}"


class CartStrategy(ABC):
    """
    Where cart operations go. Mutations return the new snapshot, or None
    when the caller should re-read the cart.
    """

    @abstractmethod
    async def load(self) -> CartSnapshot: ...

    @abstractmethod
    async def add_item(
        self, product_id: int, quantity: int, complement_ids: list[int] | None
    ) -> CartSnapshot | None: ...

    @abstractmethod
    async def add_custom_acai(
        self, payload: CustomPayload, quantity: int
    ) -> CartSnapshot | None: ...

    @abstractmethod
    async def add_custom_product(
        self, product_name: str, payload: CustomPayload, quantity: int
    ) -> CartSnapshot | None: ...

    @abstractmethod
    async def update_item(self, item_id: int | str, quantity: int) -> CartSnapshot | None: ...

    @abstractmethod
    async def remove_item(self, item_id: int | str) -> CartSnapshot | None: ...

    @abstractmethod
    async def clear(self) -> CartSnapshot | None: ...


class LocalCartStrategy(CartStrategy):
    """
    Guest cart kept in LocalStorage under GUEST_CART_KEY.

    Product lookups are best-effort: a failed lookup still adds the line,
    just without product details (unit price 0).
    """

    def __init__(self, storage: LocalStorage, api: StorefrontAPI, custom_acai_name: str):
        self.storage = storage
        self.api = api
        self.custom_acai_name = custom_acai_name

    def read_lines(self) -> list[CartLine]:
        raw = self.storage.get_item(GUEST_CART_KEY)
        if not raw:
            return []
        try:
            return _LINES.validate_json(raw)
        except ValidationError:
            logger.warning("Guest cart is corrupted, starting from an empty cart")
            return []

    def write_lines(self, lines: list[CartLine]) -> None:
        self.storage.set_item(GUEST_CART_KEY, _LINES.dump_json(lines).decode())

    def delete(self) -> None:
        self.storage.remove_item(GUEST_CART_KEY)

    async def _lookup_product(self, product_id: int) -> ProductInfo | None:
        try:
            return await self.api.get_product_by_id(product_id)
        except ApiError as e:
            logger.debug("Product %s lookup failed: %s", product_id, e.message)
            return None

    async def load(self) -> CartSnapshot:
        return _snapshot(self.read_lines())

    async def add_item(self, product_id, quantity, complement_ids):
        product = await self._lookup_product(product_id)
        lines = self.read_lines()

        existing = next(
            (line for line in lines if same_line(line, product_id, complement_ids)),
            None,
        )
        if existing is not None:
            existing.quantity += quantity
            if product is not None:
                existing.product = product
                existing.product_name = product.name
            reprice(existing)
        else:
            line = CartLine(
                id=_new_guest_id(lines),
                product_id=product_id,
                quantity=quantity,
                complement_ids=list(complement_ids) if complement_ids else None,
                type="product",
                product=product,
                product_name=product.name if product else None,
                created_at=datetime.now(timezone.utc),
            )
            lines.append(reprice(line))

        self.write_lines(lines)
        return _snapshot(lines)

    async def _append_custom(self, line: CartLine) -> CartSnapshot:
        lines = self.read_lines()
        line.id = _new_guest_id(lines)
        lines.append(reprice(line))
        self.write_lines(lines)
        return _snapshot(lines)

    async def add_custom_acai(self, payload, quantity):
        return await self._append_custom(
            CartLine(
                id="pending",
                quantity=quantity,
                complement_ids=list(payload.selected_complements) or None,
                type="custom_acai",
                product_name=self.custom_acai_name,
                custom_payload=payload,
            )
        )

    async def add_custom_product(self, product_name, payload, quantity):
        return await self._append_custom(
            CartLine(
                id="pending",
                quantity=quantity,
                complement_ids=list(payload.selected_complements) or None,
                type="custom_product",
                product_name=product_name,
                custom_payload=payload,
            )
        )

    async def update_item(self, item_id, quantity):
        lines = self.read_lines()
        line = next((line for line in lines if str(line.id) == str(item_id)), None)
        if line is None:
            return _snapshot(lines)
        line.quantity = quantity
        reprice(line)
        self.write_lines(lines)
        return _snapshot(lines)

    async def remove_item(self, item_id):
        lines = self.read_lines()
        remaining = [line for line in lines if str(line.id) != str(item_id)]
        if len(remaining) == len(lines):
            return _snapshot(lines)
        self.write_lines(remaining)
        return _snapshot(remaining)

    async def clear(self):
        self.delete()
        return CartSnapshot()


class RemoteCartStrategy(CartStrategy):
    """Server cart of the signed-in customer."""

    def __init__(self, api: StorefrontAPI):
        self.api = api

    async def load(self) -> CartSnapshot:
        return await self.api.get_cart()

    async def add_item(self, product_id, quantity, complement_ids):
        await self.api.add_to_cart(product_id, quantity, complement_ids)

    async def add_custom_acai(self, payload, quantity):
        await self.api.add_custom_acai_to_cart(payload, quantity)

    async def add_custom_product(self, product_name, payload, quantity):
        await self.api.add_custom_product_to_cart(product_name, payload, quantity)

    async def update_item(self, item_id, quantity):
        await self.api.update_cart_item(item_id, quantity)

    async def remove_item(self, item_id):
        await self.api.remove_from_cart(item_id)

    async def clear(self):
        await self.api.clear_cart()
        return CartSnapshot()


class CartStore:
    """
    The cart the UI reads: `items`, `total` and a `loading` flag.

    Operations go to the server cart when the session is authenticated and
    to the guest cart otherwise. Guest operations only fail on a storage
    write error. Signed-in mutations raise CartOperationError with a
    customer-facing message and leave `items` / `total` untouched.
    """

    def __init__(
        self,
        session: Session,
        storage: LocalStorage,
        api: StorefrontAPI,
        custom_acai_name: str | None = None,
    ):
        self.session = session
        self.local = LocalCartStrategy(
            storage, api, custom_acai_name or get_client_settings().CUSTOM_ACAI_NAME
        )
        self.remote = RemoteCartStrategy(api)
        self.items: list[CartLine] = []
        self.total = 0.0
        self.loading = False

    @property
    def strategy(self) -> CartStrategy:
        return self.remote if self.session.is_authenticated else self.local

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.items)

    def _apply(self, snapshot: CartSnapshot) -> None:
        self.items = snapshot.items
        self.total = snapshot.total

    def reset(self) -> None:
        """Zero the in-memory cart. Persisted data is left alone."""
        self.items = []
        self.total = 0.0

    async def _reload(self) -> None:
        try:
            self._apply(await self.strategy.load())
        except AuthenticationError:
            await self.session.invalidate()
        except ApiError as e:
            logger.error("Failed to load cart: %s", e.message)

    async def load(self) -> None:
        """
        Refresh from the active strategy. Load failures are logged and
        leave the current state in place.
        """
        self.loading = True
        try:
            await self._reload()
        finally:
            self.loading = False

    async def _run(
        self,
        fallback_message: str,
        call: Callable[[CartStrategy], Awaitable[CartSnapshot | None]],
    ) -> None:
        self.loading = True
        try:
            try:
                snapshot = await call(self.strategy)
            except AuthenticationError as e:
                await self.session.invalidate()
                raise CartOperationError("Your session has expired. Please sign in again.") from e
            except ApiError as e:
                logger.warning("%s: %s", fallback_message, e.message)
                raise CartOperationError(e.message or fallback_message) from e

            if snapshot is None:
                await self._reload()
            else:
                self._apply(snapshot)
        finally:
            self.loading = False

    async def add_item(
        self,
        product_id: int,
        quantity: int = 1,
        complement_ids: list[int] | None = None,
    ) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        await self._run(
            "Could not add the item to the cart",
            lambda s: s.add_item(product_id, quantity, complement_ids),
        )

    async def add_custom_acai(self, payload: CustomPayload, quantity: int = 1) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        await self._run(
            "Could not add the custom açaí to the cart",
            lambda s: s.add_custom_acai(payload, quantity),
        )

    async def add_custom_product(
        self,
        product_name: str,
        payload: CustomPayload,
        quantity: int = 1,
    ) -> None:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        await self._run(
            "Could not add the custom product to the cart",
            lambda s: s.add_custom_product(product_name, payload, quantity),
        )

    async def update_item(self, item_id: int | str, quantity: int) -> None:
        """Set a line's quantity. Zero or less removes the line."""
        if quantity <= 0:
            await self.remove_item(item_id)
            return
        await self._run(
            "Could not update the item",
            lambda s: s.update_item(item_id, quantity),
        )

    async def remove_item(self, item_id: int | str) -> None:
        await self._run(
            "Could not remove the item",
            lambda s: s.remove_item(item_id),
        )

    async def clear_cart(self) -> None:
        await self._run("Could not clear the cart", lambda s: s.clear())
