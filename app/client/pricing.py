# app/client/pricing.py
"""
Price derivation for cart lines.

Totals are never stored independently: every mutation calls `reprice` on
the touched line and `cart_total` on the whole list.
"""
from collections.abc import Iterable, Sequence

from app.client.models import CartLine


def round_money(value: float) -> float:
    return round(value, 2)


def unit_price(line: CartLine) -> float:
    """
    Custom value for build-your-own lines, catalog price when the product
    is known, otherwise the last known unit price (0 for a line added
    while the product lookup failed).
    """
    if line.custom_payload is not None:
        return line.custom_payload.value
    if line.product is not None:
        return line.product.price
    return line.unit_price


def line_total(price: float, quantity: int) -> float:
    return round_money(price * quantity)


def reprice(line: CartLine) -> CartLine:
    """Recompute unit_price and total_price in place."""
    line.unit_price = unit_price(line)
    line.total_price = line_total(line.unit_price, line.quantity)
    return line


def cart_total(lines: Iterable[CartLine]) -> float:
    return round_money(sum(line.total_price for line in lines))


def complements_key(complement_ids: Sequence[int] | None) -> tuple[int, ...]:
    """
    Order-insensitive key for a complement selection: [3, 1] and [1, 3]
    are the same choice. Duplicates are kept.
    """
    return tuple(sorted(complement_ids or ()))


def same_line(
    line: CartLine,
    product_id: int,
    complement_ids: Sequence[int] | None,
) -> bool:
    """Whether adding (product_id, complement_ids) should merge into `line`."""
    return (
        not line.is_custom
        and line.product_id == product_id
        and complements_key(line.complement_ids) == complements_key(complement_ids)
    )
