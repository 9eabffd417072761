from app.client.exceptions import ApiError, AuthenticationError
from app.client.models import (
    CartLine,
    CartSnapshot,
    LoginResult,
    ProductInfo,
    UserProfile,
)
from app.client.pricing import cart_total, reprice

USER = UserProfile(id=7, username="ana", email="ana@example.com", role="user")


class FakeApi:
    """
    In-memory stand-in for StorefrontAPI. Records every server cart call
    in `calls` and keeps a naive server cart in `server_lines`.
    """

    def __init__(self, products=None, failing_products=(), profile=USER):
        self.products = {p.id: p for p in (products or [])}
        self.failing_products = set(failing_products)
        self.profile = profile
        self.profile_error: ApiError | None = None
        self.cart_error: ApiError | None = None
        self.login_error: ApiError | None = None
        self.calls: list[tuple] = []
        self.server_lines: list[CartLine] = []
        self.token_provider = lambda: None

    def use_token(self, token_provider):
        self.token_provider = token_provider

    async def login(self, email, password):
        self.calls.append(("login", email))
        if self.login_error:
            raise self.login_error
        return LoginResult(token="tok-123", user=self.profile)

    async def get_profile(self):
        self.calls.append(("get_profile", self.token_provider()))
        if self.profile_error:
            raise self.profile_error
        return self.profile

    async def get_product_by_id(self, product_id):
        if product_id not in self.products:
            raise ApiError("Product not found", 404)
        return self.products[product_id]

    async def add_to_cart(self, product_id, quantity, complement_ids=None):
        self.calls.append(("add", product_id, quantity, complement_ids))
        if product_id in self.failing_products:
            raise ApiError("Product is inactive", 400)
        line = CartLine(
            id=len(self.server_lines) + 1,
            product_id=product_id,
            quantity=quantity,
            complement_ids=complement_ids,
            product=self.products.get(product_id),
        )
        self.server_lines.append(reprice(line))

    async def get_cart(self):
        self.calls.append(("get_cart",))
        if self.cart_error:
            raise self.cart_error
        return CartSnapshot(items=list(self.server_lines), total=cart_total(self.server_lines))

    async def clear_cart(self):
        self.calls.append(("clear",))
        self.server_lines = []


class ExpiredTokenApi(FakeApi):
    async def add_to_cart(self, product_id, quantity, complement_ids=None):
        raise AuthenticationError("Invalid or expired token", 401)


ACAI = ProductInfo(id=10, name="Açaí 500ml", price=5.0)
SHAKE = ProductInfo(id=11, name="Milkshake", price=12.0)
