from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from .errors import InvalidAmount

D = Decimal

CENT = D("0.01")
ZERO = D("0.00")
_FLOAT_NOISE = D("1e-9")
# Amounts carry at most fifteen integer digits.
MAX_INTEGER_DIGITS = 15


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None


def _check_magnitude(amount: Decimal, value: Any, field: str) -> None:
    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise InvalidAmount(f"{field} is too large to represent: {value}", field=field)


def to_amount(value: Any, *, field: str = "amount") -> Decimal:
    """Coerce ``value`` into a two-decimal Decimal or raise InvalidAmount.

    Exact inputs (Decimal, int, str) must already sit on the cent grid. Floats
    carry binary noise, so they are snapped to cents when within 1e-9 of it.
    """
    amount = to_decimal(value)
    if amount is None:
        raise InvalidAmount(f"{field} is not a number", field=field)
    if not amount.is_finite():
        raise InvalidAmount(f"{field} must be finite", field=field)
    _check_magnitude(amount, value, field)
    snapped = round2(amount)
    if snapped != amount:
        if not isinstance(value, float) or abs(snapped - amount) > _FLOAT_NOISE:
            raise InvalidAmount(f"{field} has more than two decimals: {value}", field=field)
    return snapped


def to_rounded(value: Any, *, field: str = "amount") -> Decimal:
    """Finite value rounded half-up to the cent, for derived figures such as monthly averages."""
    amount = to_decimal(value)
    if amount is None or not amount.is_finite():
        raise InvalidAmount(f"{field} must be a finite number", field=field)
    _check_magnitude(amount, value, field)
    return round2(amount)


def to_base(value: Any, *, field: str = "base") -> Decimal:
    amount = to_amount(value, field=field)
    if amount < 0:
        raise InvalidAmount(f"{field} cannot be negative", field=field)
    return amount


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    total = ZERO
    for value in values:
        total += value
    return round2(total)


__all__ = [
    "D",
    "CENT",
    "MAX_INTEGER_DIGITS",
    "ZERO",
    "round2",
    "to_decimal",
    "to_amount",
    "to_rounded",
    "to_base",
    "sum_amounts",
]
