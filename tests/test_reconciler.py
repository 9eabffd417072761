import pytest

from app.client.cart_store import GUEST_CART_KEY, CartStore
from app.client.models import CustomPayload
from app.client.reconciler import Reconciler
from app.client.session import Session
from app.client.storage import LocalStorage
from tests.fakes import ACAI, SHAKE, FakeApi


def build(api):
    storage = LocalStorage()
    session = Session(api, storage)
    store = CartStore(session, storage, api)
    reconciler = Reconciler(session, store, api)
    return reconciler, store, session, storage


def adds(api):
    return [call[1:] for call in api.calls if call[0] == "add"]


class TestReconciler:
    async def test_login_pushes_product_lines_and_skips_custom(self):
        api = FakeApi(products=[ACAI])
        reconciler, store, session, storage = build(api)

        await store.add_item(10, 2, [1])
        await store.add_item(10, 1, [1])
        await store.add_custom_acai(CustomPayload(value=8.0), 1)
        assert store.total == pytest.approx(23.0)

        await session.login("ana@example.com", "secret123")

        assert adds(api) == [(10, 3, [1])]
        report = reconciler.last_report
        assert len(report.synced) == 1
        assert len(report.skipped) == 1
        assert report.ok
        assert storage.get_item(GUEST_CART_KEY) is None
        assert store.total == pytest.approx(15.0)
        assert [line.id for line in store.items] == [1]

    async def test_lines_sent_in_insertion_order(self):
        api = FakeApi(products=[ACAI, SHAKE])
        _, store, session, _ = build(api)
        await store.add_item(11, 1)
        await store.add_item(10, 4)
        await store.add_item(11, 2, [5])

        await session.login("ana@example.com", "secret123")
        assert adds(api) == [(11, 1, None), (10, 4, None), (11, 2, [5])]

    async def test_one_failure_does_not_stop_the_rest(self):
        api = FakeApi(products=[ACAI, SHAKE], failing_products={11})
        reconciler, store, session, storage = build(api)
        await store.add_item(10, 1)
        await store.add_item(11, 1)
        await store.add_item(10, 1, [2])

        await session.login("ana@example.com", "secret123")

        report = reconciler.last_report
        assert len(adds(api)) == 3
        assert len(report.synced) == 2
        assert [f.product_id for f in report.failures] == [11]
        assert not report.ok
        # guest cart is dropped even when some lines failed
        assert storage.get_item(GUEST_CART_KEY) is None
        assert {line.product_id for line in store.items} == {10}

    async def test_empty_guest_cart_just_loads(self):
        api = FakeApi(products=[ACAI])
        reconciler, store, session, _ = build(api)
        await session.login("ana@example.com", "secret123")
        assert adds(api) == []
        assert ("get_cart",) in api.calls
        assert reconciler.last_report.synced == []

    async def test_logout_resets_without_merge(self):
        api = FakeApi(products=[ACAI])
        _, store, session, storage = build(api)
        await session.login("ana@example.com", "secret123")
        await store.add_item(10, 2)
        assert store.items

        calls_before = len(api.calls)
        await session.logout()
        assert store.items == [] and store.total == 0.0
        assert len(api.calls) == calls_before
        assert storage.get_item(GUEST_CART_KEY) is None

    async def test_close_stops_listening(self):
        api = FakeApi(products=[ACAI])
        reconciler, store, session, _ = build(api)
        await store.add_item(10, 1)
        reconciler.close()
        await session.login("ana@example.com", "secret123")
        assert adds(api) == []
        assert reconciler.last_report is None
