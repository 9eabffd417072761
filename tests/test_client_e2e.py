"""
The client core driven against the real FastAPI app through
httpx.ASGITransport (no network, in-memory SQLite).
"""
import pytest

from app.client.cart_store import GUEST_CART_KEY
from app.client.config import ClientSettings
from app.client.exceptions import ApiError, CartOperationError
from app.client.models import CustomPayload
from app.client.storefront import Storefront

EMAIL = "ana@example.com"
PASSWORD = "secret123"


@pytest.fixture
async def storefront(asgi_transport, tmp_path):
    sf = Storefront.create(
        settings=ClientSettings(
            API_BASE_URL="http://testserver/api",
            STORAGE_PATH=str(tmp_path / "state.json"),
        ),
        transport=asgi_transport,
    )
    await sf.session.register("ana", EMAIL, PASSWORD)
    await sf.start()
    yield sf
    await sf.aclose()


class TestGuestToCustomer:
    async def test_guest_cart_is_merged_on_login(self, storefront):
        cart = storefront.cart
        assert not storefront.session.is_authenticated

        await cart.add_item(1, 2, [2, 1])
        await cart.add_item(1, 1, [1, 2])
        await cart.add_custom_acai(CustomPayload(value=8.0, complement_names=["Granola"]), 1)
        assert cart.total == pytest.approx(23.0)
        assert cart.items[0].product.name == "Açaí 500ml"

        await storefront.session.login(EMAIL, PASSWORD)

        report = storefront.reconciler.last_report
        assert len(report.synced) == 1 and len(report.skipped) == 1
        assert storefront.storage.get_item(GUEST_CART_KEY) is None
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.items[0].complement_ids == [1, 2]
        assert cart.total == pytest.approx(15.0)

    async def test_customer_cart_operations(self, storefront):
        cart = storefront.cart
        await storefront.session.login(EMAIL, PASSWORD)

        await cart.add_item(1, 1)
        await cart.add_custom_acai(CustomPayload(value=8.0, selected_complements=[1]), 2)
        assert cart.total == pytest.approx(21.0)
        custom = cart.items[1]
        assert custom.type == "custom_acai"
        assert custom.custom_payload.value == 8.0

        await cart.update_item(cart.items[0].id, 4)
        assert cart.total == pytest.approx(36.0)

        await cart.remove_item(custom.id)
        assert cart.total == pytest.approx(20.0)

        with pytest.raises(CartOperationError, match="Product not found"):
            await cart.add_item(999, 1)
        assert cart.total == pytest.approx(20.0)

        await cart.clear_cart()
        assert cart.items == []

    async def test_logout_resets_cart(self, storefront):
        await storefront.session.login(EMAIL, PASSWORD)
        await storefront.cart.add_item(1, 1)
        await storefront.session.logout()
        assert storefront.cart.items == []
        assert storefront.cart.total == 0.0

    async def test_restart_restores_session_and_server_cart(self, storefront, asgi_transport):
        await storefront.session.login(EMAIL, PASSWORD)
        await storefront.cart.add_item(3, 1)

        again = Storefront.create(
            settings=ClientSettings(
                API_BASE_URL="http://testserver/api",
                STORAGE_PATH=str(storefront.storage.path),
            ),
            transport=asgi_transport,
        )
        await again.start()
        assert again.session.is_authenticated
        assert again.cart.total == pytest.approx(12.0)
        await again.aclose()

    async def test_checkout(self, storefront):
        await storefront.session.login(EMAIL, PASSWORD)
        await storefront.cart.add_item(1, 2)
        order = await storefront.api.create_order(
            "PIX",
            delivery_type="delivery",
            delivery_fee=3.0,
            shipping_street="Rua A",
            shipping_number="1",
            shipping_neighborhood="Centro",
        )
        assert order["total_price"] == pytest.approx(13.0)

        history = await storefront.api.get_order_history()
        assert [o["id"] for o in history] == [order["id"]]

        canceled = await storefront.api.cancel_order(order["id"])
        assert canceled["status"] == "canceled"

        status = await storefront.api.get_store_status()
        assert status["is_open"] is True

    async def test_catalog(self, storefront):
        acai = await storefront.api.get_products(category="acai")
        assert {p.name for p in acai} == {"Açaí 500ml", "Açaí Personalizado"}

        complements = await storefront.api.get_complements()
        assert [c.name for c in complements] == ["Banana", "Granola", "Leite em pó"]

        product = await storefront.api.get_product_by_id(3)
        assert product.price == 12.0

    async def test_bad_login_is_reported(self, storefront):
        with pytest.raises(ApiError, match="Invalid credentials"):
            await storefront.session.login(EMAIL, "wrong-password")
        assert not storefront.session.is_authenticated
