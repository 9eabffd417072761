import pytest

from app.client.cart_store import GUEST_CART_KEY, CartStore
from app.client.exceptions import CartOperationError, NetworkError, StorageError
from app.client.models import CustomPayload
from app.client.session import TOKEN_KEY, USER_KEY, Session
from app.client.storage import LocalStorage
from tests.fakes import ACAI, SHAKE, USER, ExpiredTokenApi, FakeApi


def build(api=None, storage=None):
    api = api or FakeApi(products=[ACAI, SHAKE])
    storage = storage or LocalStorage()
    session = Session(api, storage)
    return CartStore(session, storage, api), session, storage


class TestGuestCart:
    async def test_worked_example(self):
        store, _, _ = build()
        await store.add_item(10, 2, [1])
        assert store.total == pytest.approx(10.0)

        await store.add_item(10, 1, [1])
        assert len(store.items) == 1
        assert store.items[0].quantity == 3
        assert store.total == pytest.approx(15.0)

        await store.add_custom_acai(CustomPayload(value=8.0, complement_names=["Granola"]), 1)
        assert len(store.items) == 2
        assert store.total == pytest.approx(23.0)
        custom = store.items[1]
        assert custom.type == "custom_acai"
        assert custom.product_id is None

    async def test_complement_order_does_not_matter(self):
        store, _, _ = build()
        await store.add_item(10, 1, [3, 1])
        await store.add_item(10, 1, [1, 3])
        assert [line.quantity for line in store.items] == [2]

    async def test_different_complements_are_separate_lines(self):
        store, _, _ = build()
        await store.add_item(10, 1, [1])
        await store.add_item(10, 1, None)
        assert len(store.items) == 2

    async def test_custom_lines_never_merge(self):
        store, _, _ = build()
        payload = CustomPayload(value=8.0)
        await store.add_custom_acai(payload, 1)
        await store.add_custom_acai(payload, 1)
        assert len(store.items) == 2
        assert store.items[0].id != store.items[1].id

    async def test_failed_lookup_still_adds_line(self):
        store, _, _ = build()
        await store.add_item(999, 2)
        assert len(store.items) == 1
        assert store.items[0].product is None
        assert store.total == 0.0

    async def test_update_and_remove(self):
        store, _, _ = build()
        await store.add_item(10, 1)
        await store.add_item(11, 1)
        shake_id = store.items[1].id

        await store.update_item(shake_id, 3)
        assert store.total == pytest.approx(5.0 + 36.0)

        before = store.total
        await store.remove_item(shake_id)
        assert store.total == pytest.approx(before - 36.0)
        assert [line.product_id for line in store.items] == [10]

    async def test_unknown_ids_are_noops(self):
        store, _, storage = build()
        await store.add_item(10, 1)
        persisted = storage.get_item(GUEST_CART_KEY)

        await store.update_item("guest-nope", 5)
        await store.remove_item("guest-nope")
        assert store.total == pytest.approx(5.0)
        assert storage.get_item(GUEST_CART_KEY) == persisted

    async def test_update_to_zero_removes(self):
        store, _, _ = build()
        await store.add_item(10, 1)
        await store.update_item(store.items[0].id, 0)
        assert store.items == []

    async def test_clear_deletes_guest_collection(self):
        store, _, storage = build()
        await store.add_item(10, 1)
        await store.clear_cart()
        assert store.items == [] and store.total == 0.0
        assert storage.get_item(GUEST_CART_KEY) is None

    async def test_persisted_cart_reloads_identically(self, tmp_path):
        path = tmp_path / "state.json"
        store, _, _ = build(storage=LocalStorage(path))
        await store.add_item(10, 2, [2, 1])
        await store.add_custom_product("Milkshake", CustomPayload(value=15.5), 1)

        reloaded, _, _ = build(storage=LocalStorage(path))
        await reloaded.load()
        assert reloaded.items == store.items
        assert reloaded.total == store.total

    async def test_corrupted_guest_cart_is_empty(self):
        storage = LocalStorage()
        storage.set_item(GUEST_CART_KEY, '[{"id": "guest-1", "quantity": -4}]')
        store, _, _ = build(storage=storage)
        await store.load()
        assert store.items == []
        assert store.total == 0.0

    async def test_loading_flag_cleared(self):
        store, _, _ = build()
        await store.add_item(10, 1)
        assert store.loading is False

    async def test_non_positive_quantity_rejected(self):
        store, _, _ = build()
        with pytest.raises(ValueError):
            await store.add_item(10, 0)

    async def test_storage_failure_surfaces_and_clears_loading(self, tmp_path):
        blocker = tmp_path / "state.json"
        blocker.mkdir()
        store, _, _ = build(storage=LocalStorage(blocker))
        with pytest.raises(StorageError):
            await store.add_item(10, 1)
        assert store.loading is False
        assert store.items == []

    async def test_custom_acai_name_is_configurable(self):
        api = FakeApi()
        storage = LocalStorage()
        store = CartStore(Session(api, storage), storage, api, custom_acai_name="Açaí da Casa")
        await store.add_custom_acai(CustomPayload(value=9.0), 1)
        assert store.items[0].display_name == "Açaí da Casa"


class TestAuthenticatedCart:
    async def _signed_in(self, api):
        store, session, storage = build(api=api)
        await session.login("ana@example.com", "secret123")
        return store, session, storage

    async def test_mutations_go_to_server_and_reload(self):
        api = FakeApi(products=[ACAI])
        store, _, storage = await self._signed_in(api)

        await store.add_item(10, 2, [1])
        assert ("add", 10, 2, [1]) in api.calls
        assert api.calls[-1] == ("get_cart",)
        assert store.total == pytest.approx(10.0)
        assert storage.get_item(GUEST_CART_KEY) is None

    async def test_server_error_becomes_cart_operation_error(self):
        api = FakeApi(products=[ACAI], failing_products={10})
        store, _, _ = await self._signed_in(api)

        with pytest.raises(CartOperationError, match="Product is inactive"):
            await store.add_item(10, 1)
        assert store.items == []
        assert store.loading is False

    async def test_expired_token_signs_out(self):
        api = ExpiredTokenApi(products=[ACAI])
        store, session, storage = await self._signed_in(api)

        with pytest.raises(CartOperationError):
            await store.add_item(10, 1)
        assert not session.is_authenticated
        assert storage.get_item(TOKEN_KEY) is None
        assert storage.get_item(USER_KEY) is None

    async def test_clear_zeroes_locally(self):
        api = FakeApi(products=[ACAI])
        store, _, _ = await self._signed_in(api)
        await store.add_item(10, 1)
        await store.clear_cart()
        assert ("clear",) in api.calls
        assert store.items == [] and store.total == 0.0

    async def test_strategy_follows_session(self):
        api = FakeApi(products=[ACAI])
        store, session, _ = build(api=api)
        assert store.strategy is store.local
        await session.login("ana@example.com", "secret123")
        assert session.user == USER
        assert store.strategy is store.remote

    async def test_load_failure_keeps_previous_state(self, caplog):
        api = FakeApi(products=[ACAI])
        store, session, _ = await self._signed_in(api)
        await store.add_item(10, 2)
        before = list(store.items)

        api.cart_error = NetworkError("Could not reach the server: timed out")
        await store.load()

        assert store.items == before
        assert store.total == pytest.approx(10.0)
        assert store.loading is False
        assert session.is_authenticated
        assert "Failed to load cart" in caplog.text
