"""Derived-value calculator for shipments, importing costs and customs.

Pure functions, no I/O. All arithmetic is done in `decimal.Decimal`:
money is quantized to 2 places and floor space to 3, both ROUND_HALF_UP,
so sums never pick up binary floating-point drift.

    cou          = ctn × pcs_per_ctn
    line total   = cou × unit price
    shipment     = Σ line totals
    commission   = shipment total × percent / 100
    loss/damage  = pieces recorded − pieces adjusted   (not clamped)
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol

MONEY_PLACES = Decimal("0.01")
SPACE_PLACES = Decimal("0.001")
HUNDRED = Decimal("100")
# largest value a Numeric(18, 2) column holds
MAX_MONEY = Decimal("9999999999999999.99")


class PricedLine(Protocol):
    ctn: int
    pcs_per_ctn: int
    pri: Decimal


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through str() so 2.5 becomes Decimal("2.5"), not its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def money(value: Any) -> Decimal:
    """Quantize a monetary value to 2 decimal places."""
    return _to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def space(value: Any) -> Decimal:
    """Quantize a floor-space value (m²) to 3 decimal places."""
    return _to_decimal(value).quantize(SPACE_PLACES, rounding=ROUND_HALF_UP)


def cou(ctn: int, pcs_per_ctn: int) -> int:
    """Total piece count of a line."""
    return ctn * pcs_per_ctn


def line_total(ctn: int, pcs_per_ctn: int, unit_price: Any) -> Decimal:
    """(ctn × pcs_per_ctn) × unit_price, as money."""
    return money(Decimal(cou(ctn, pcs_per_ctn)) * _to_decimal(unit_price))


def shipment_total_price(items: Iterable[PricedLine]) -> Decimal:
    """Sum of line totals, recomputed from each item's inputs."""
    total = Decimal("0")
    for item in items:
        total += line_total(item.ctn, item.pcs_per_ctn, item.pri)
    return money(total)


def commission_amount(total_price: Any, commission_percent: Any) -> Decimal:
    """total_price × commission_percent / 100.

    Raises:
        ValueError: percent outside [0, 100] or a negative total.
    """
    total = _to_decimal(total_price)
    percent = _to_decimal(commission_percent)
    if total < 0:
        raise ValueError("Total price must be >= 0")
    if percent < 0 or percent > HUNDRED:
        raise ValueError("Commission percent must be between 0 and 100")
    return money(total * percent / HUNDRED)


def loss_or_damage(recorded: int, adjusted: int) -> int:
    return recorded - adjusted


def total_pieces(items: Iterable[Any]) -> int:
    return sum(cou(i.ctn, i.pcs_per_ctn) for i in items)


def total_cartons(items: Iterable[Any]) -> int:
    return sum(i.ctn for i in items)


def total_paid_customs(rows: Iterable[Any]) -> Decimal:
    return money(sum((_to_decimal(r.paid_customs) for r in rows), Decimal("0")))


def total_paid_takhreg(rows: Iterable[Any]) -> Decimal:
    return money(sum((_to_decimal(r.takhreg) for r in rows), Decimal("0")))


def totals_per_item_type(items: Iterable[Any]) -> dict[str, tuple[int, int]]:
    """Map item_type_id → (pieces, cartons) across the given items.

    Keys keep first-seen order so seeded customs rows follow item order.
    """
    per_type: dict[str, tuple[int, int]] = {}
    for item in items:
        pcs, ctn = per_type.get(item.item_type_id, (0, 0))
        per_type[item.item_type_id] = (
            pcs + cou(item.ctn, item.pcs_per_ctn),
            ctn + item.ctn,
        )
    return per_type
