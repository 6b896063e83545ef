"""Order pricing.

All arithmetic happens in ``Decimal`` and every amount is quantized to two
places (half-up) before it leaves this module. Callers get plain floats back
because that is what the aggregates store.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_TAX_RATE = 0.16
TOLERANCE = 1.0

_CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a number to a two-place Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        # Going through str() keeps 0.1 as 0.1 instead of its binary expansion
        amount = Decimal(str(value or 0))
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricedTotals:
    subtotal: float
    shipping_cost: float
    tax: float
    total: float


def calculate_totals(lines, shipping_cost=0.0, tax_rate=DEFAULT_TAX_RATE) -> PricedTotals:
    """Price a set of lines.

    Args:
        lines: Iterable of objects or dicts exposing ``unit_price`` and
            ``quantity``.
        shipping_cost: Flat shipping charge added after tax is computed.
        tax_rate: Fraction of the subtotal charged as tax.
    """
    subtotal = Decimal("0.00")
    for line in lines:
        if isinstance(line, dict):
            unit_price, quantity = line["unit_price"], line["quantity"]
        else:
            unit_price, quantity = line.unit_price, line.quantity
        subtotal += to_money(unit_price) * int(quantity)
    subtotal = to_money(subtotal)

    shipping = to_money(shipping_cost)
    tax = to_money(subtotal * Decimal(str(tax_rate)))
    total = to_money(subtotal + shipping + tax)

    return PricedTotals(
        subtotal=float(subtotal),
        shipping_cost=float(shipping),
        tax=float(tax),
        total=float(total),
    )


def line_total(unit_price, quantity) -> float:
    return float(to_money(to_money(unit_price) * int(quantity)))


def within_tolerance(calculated, submitted, tolerance=TOLERANCE) -> bool:
    """Whether a client-submitted amount is close enough to the computed one."""
    return abs(to_money(calculated) - to_money(submitted)) <= to_money(tolerance)
