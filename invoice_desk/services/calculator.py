from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Mapping

from invoice_desk.models.invoice import to_amount

CENT = Decimal("0.01")
# float-range products reach ~1e617; sums keep every digit down to the cent
_WORK_PREC = 1000


def _clean_decimal(val: Any) -> Decimal:
    """Decimal twin of the LineItem coercion: same inputs, same zeroes."""
    return Decimal(repr(to_amount(val)))


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _raw_line_total(item: Any) -> Decimal:
    return _clean_decimal(_field(item, "quantity")) * _clean_decimal(_field(item, "price"))


def _to_cents(amount: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(28, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(item: Any) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _WORK_PREC
        amount = _raw_line_total(item)
    return _to_cents(amount)


def total(items: Iterable[Any]) -> Decimal:
    """Sum of quantity * price over the items, to exactly two decimals."""
    with localcontext() as ctx:
        ctx.prec = _WORK_PREC
        amount = sum((_raw_line_total(it) for it in items or ()), Decimal(0))
    return _to_cents(amount)


def format_amount(value: Any) -> str:
    return f"{_to_cents(_clean_decimal(value))}"
