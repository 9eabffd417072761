# app/client/api.py
import logging
from collections.abc import Callable
from typing import Any

import httpx

from app.client.exceptions import ApiError, AuthenticationError, NetworkError
from app.client.models import (
    CartLine,
    CartSnapshot,
    ComplementInfo,
    CustomPayload,
    LoginResult,
    ProductInfo,
    UserProfile,
)
from app.client.pricing import cart_total

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    """
    Pull the user-facing message out of an error response. FastAPI puts it
    under `detail` (a string, or a list for validation errors).
    """
    try:
        body = response.json()
    except ValueError:
        return (response.text or response.reason_phrase or "Request failed"), None

    if isinstance(body, dict):
        detail = body.get("detail", body.get("message"))
        if isinstance(detail, str):
            return detail, detail
        if isinstance(detail, dict) and isinstance(detail.get("message"), str):
            return detail["message"], detail
        if isinstance(detail, list) and detail and isinstance(detail[0], dict):
            return str(detail[0].get("msg", "Invalid request")), detail
        if detail is not None:
            return str(detail), detail
    return response.reason_phrase or "Request failed", body


class StorefrontAPI:
    """
    Async HTTP client for the storefront backend.

    The bearer token is pulled from `token_provider` on every request, so
    whoever owns the session (see app.client.session.Session) decides
    which credentials go out.

    Errors:
      - 401 / 403 -> AuthenticationError
      - other 4xx / 5xx -> ApiError (message from the response `detail`)
      - transport and other httpx failures -> NetworkError
      - a 2xx body that is not JSON -> ApiError
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._token_provider: TokenProvider = token_provider or (lambda: None)

    def use_token(self, token_provider: TokenProvider) -> None:
        self._token_provider = token_provider

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StorefrontAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> Any:
        headers = {}
        token = self._token_provider() if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(f"Could not reach the server: {e}") from e

        if response.is_error:
            message, detail = _error_message(response)
            logger.debug("%s %s -> %s %s", method, path, response.status_code, message)
            if response.status_code in (401, 403):
                raise AuthenticationError(message, response.status_code, detail)
            raise ApiError(message, response.status_code, detail)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ApiError("Unexpected response from the server", response.status_code) from e

    # ----- auth -----

    async def login(self, email: str, password: str) -> LoginResult:
        data = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )
        return LoginResult.model_validate(data)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        phone: str | None = None,
    ) -> UserProfile:
        payload = {"username": username, "email": email, "password": password}
        if phone:
            payload["phone"] = phone
        data = await self._request(
            "POST", "/auth/register", json=payload, authenticated=False
        )
        return UserProfile.model_validate(data)

    async def get_profile(self) -> UserProfile:
        return UserProfile.model_validate(await self._request("GET", "/auth/profile"))

    # ----- cart -----

    async def get_cart(self) -> CartSnapshot:
        """
        The server cart. The total is recomputed from the lines so it follows
        the same rounding as the guest cart; a server `cart_total` that
        disagrees is logged and otherwise ignored.
        """
        data = await self._request("GET", "/cart") or {}
        items = [CartLine.from_server(item) for item in data.get("items", [])]
        total = cart_total(items)
        server_total = data.get("cart_total")
        if server_total is not None and abs(server_total - total) >= 0.01:
            logger.warning(
                "Server cart total %.2f differs from lines total %.2f", server_total, total
            )
        return CartSnapshot(items=items, total=total)

    async def add_to_cart(
        self,
        product_id: int,
        quantity: int,
        complement_ids: list[int] | None = None,
    ) -> None:
        await self._request(
            "POST",
            "/cart/add",
            json={
                "product_id": product_id,
                "quantity": quantity,
                "complement_ids": list(complement_ids or []),
            },
        )

    async def add_custom_acai_to_cart(self, payload: CustomPayload, quantity: int) -> None:
        await self._request(
            "POST",
            "/cart/add-custom-acai",
            json={**payload.model_dump(), "quantity": quantity},
        )

    async def add_custom_product_to_cart(
        self,
        product_name: str,
        payload: CustomPayload,
        quantity: int,
    ) -> None:
        await self._request(
            "POST",
            "/cart/add-custom-product",
            json={**payload.model_dump(), "quantity": quantity, "product_name": product_name},
        )

    async def update_cart_item(self, item_id: int | str, quantity: int) -> None:
        await self._request("PUT", f"/cart/update/{item_id}", json={"quantity": quantity})

    async def remove_from_cart(self, item_id: int | str) -> None:
        await self._request("DELETE", f"/cart/remove/{item_id}")

    async def clear_cart(self) -> None:
        await self._request("DELETE", "/cart/clear")

    # ----- catalog -----

    async def get_product_by_id(self, product_id: int) -> ProductInfo:
        data = await self._request("GET", f"/products/{product_id}", authenticated=False)
        return ProductInfo.model_validate(data)

    async def get_products(self, category: str | None = None) -> list[ProductInfo]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/products", params=params, authenticated=False)
        return [ProductInfo.model_validate(p) for p in data]

    async def get_complements(self) -> list[ComplementInfo]:
        data = await self._request("GET", "/complements", authenticated=False)
        return [ComplementInfo.model_validate(c) for c in data]

    # ----- orders / store -----

    async def create_order(
        self,
        payment_method: str,
        delivery_type: str = "delivery",
        delivery_fee: float = 0.0,
        **shipping: str | None,
    ) -> dict[str, Any]:
        """
        Checkout the server cart. `shipping` takes the shipping_* fields
        (street, number, complement, neighborhood, phone).
        """
        payload = {
            "payment_method": payment_method,
            "delivery_type": delivery_type,
            "delivery_fee": delivery_fee,
            **shipping,
        }
        return await self._request("POST", "/orders", json=payload)

    async def get_order_history(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/orders/history")

    async def cancel_order(self, order_id: int) -> dict[str, Any]:
        return await self._request("PUT", f"/orders/cancel/{order_id}")

    async def get_store_status(self) -> dict[str, Any]:
        return await self._request("GET", "/store-config/status", authenticated=False)
