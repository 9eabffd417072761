import pytest

from app.client.models import CartLine, CustomPayload, ProductInfo
from app.client.pricing import cart_total, complements_key, reprice, same_line, unit_price


def make_line(**kwargs) -> CartLine:
    return reprice(CartLine(id=kwargs.pop("id", "guest-1"), **kwargs))


class TestUnitPrice:
    def test_product_price(self):
        line = make_line(product_id=1, quantity=3, product=ProductInfo(id=1, name="A", price=5.0))
        assert unit_price(line) == 5.0
        assert line.total_price == 15.0

    def test_custom_value_wins(self):
        line = make_line(
            quantity=2,
            type="custom_acai",
            custom_payload=CustomPayload(value=8.5),
        )
        assert line.total_price == 17.0

    def test_unknown_product_is_zero(self):
        assert make_line(product_id=1, quantity=4).total_price == 0.0

    def test_rounded_to_cents(self):
        line = make_line(product_id=1, quantity=3, product=ProductInfo(id=1, name="A", price=0.1))
        assert line.total_price == 0.3


def test_cart_total_sums_lines():
    lines = [
        make_line(id="a", product_id=1, quantity=3, product=ProductInfo(id=1, name="A", price=5.0)),
        make_line(id="b", quantity=1, type="custom_acai", custom_payload=CustomPayload(value=8.0)),
    ]
    assert cart_total(lines) == pytest.approx(23.0)
    assert cart_total([]) == 0.0


class TestMatching:
    def test_complements_key_ignores_order_and_none(self):
        assert complements_key([3, 1]) == complements_key([1, 3])
        assert complements_key(None) == complements_key([])

    def test_duplicates_are_significant(self):
        assert complements_key([1, 1]) != complements_key([1])

    def test_same_line(self):
        line = make_line(product_id=1, quantity=1, complement_ids=[2, 1])
        assert same_line(line, 1, [1, 2])
        assert not same_line(line, 1, [1])
        assert not same_line(line, 2, [1, 2])

    def test_custom_lines_never_match(self):
        line = make_line(
            product_id=1,
            quantity=1,
            type="custom_product",
            custom_payload=CustomPayload(value=3.0),
        )
        assert not same_line(line, 1, None)
