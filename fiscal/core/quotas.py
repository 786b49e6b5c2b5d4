from __future__ import annotations

from decimal import Decimal
from typing import Any

from .errors import UnsupportedRate
from .money import D, to_amount, to_base, to_decimal, round2

VAT_SUPER_REDUCED = D("4")
VAT_REDUCED = D("10")
VAT_GENERAL = D("21")

VAT_RATES: frozenset[Decimal] = frozenset({VAT_SUPER_REDUCED, VAT_REDUCED, VAT_GENERAL})
# 0 covers invoices issued without withholding, 7 new professionals,
# 15 the general professional rate and 19 rents and capital.
WITHHOLDING_RATES: frozenset[Decimal] = frozenset({D("0"), D("7"), D("15"), D("19")})

RENTAL_WITHHOLDING_RATE = D("19")

QUOTA_TOLERANCE = D("0.01")


def _check_rate(rate: Any, permitted: frozenset[Decimal], *, field: str) -> Decimal:
    value = to_decimal(rate)
    if value is None or not value.is_finite() or value not in permitted:
        allowed = ", ".join(str(r) for r in sorted(permitted))
        raise UnsupportedRate(f"{field} {rate!r} not in permitted set ({allowed})", field=field)
    return value


def check_vat_rate(rate: Any) -> Decimal:
    return _check_rate(rate, VAT_RATES, field="vat_rate")


def check_withholding_rate(rate: Any) -> Decimal:
    return _check_rate(rate, WITHHOLDING_RATES, field="withholding_rate")


def _quota(base: Decimal, rate: Decimal) -> Decimal:
    return round2(base * rate / D("100"))


def vat_quota(base: Any, rate: Any) -> Decimal:
    """VAT charged on ``base`` at ``rate`` percent, rounded half-up to the cent."""
    return _quota(to_base(base), check_vat_rate(rate))


def withholding_quota(base: Any, rate: Any) -> Decimal:
    """Income-tax withholding retained by the client on ``base``."""
    return _quota(to_base(base), check_withholding_rate(rate))


def rental_withholding(base: Any) -> Decimal:
    return _quota(to_base(base, field="rental_base"), RENTAL_WITHHOLDING_RATE)


def document_total(base: Any, vat: Any, withholding: Any = 0) -> Decimal:
    """Invoice total: base plus VAT minus withholding."""
    amount = to_base(base)
    vat_amount = to_base(vat, field="vat_quota")
    withheld = to_base(withholding, field="withholding_quota")
    return round2(amount + vat_amount - withheld)


# Expenses use the same formula; withholding applies to rent paid.
expense_total = document_total


def _within_tolerance(expected: Decimal, declared: Any) -> bool:
    value = to_decimal(declared)
    if value is None or not value.is_finite():
        return False
    return abs(value - expected) <= QUOTA_TOLERANCE


def validate_vat_quota(base: Any, rate: Any, declared: Any) -> bool:
    return _within_tolerance(vat_quota(base, rate), declared)


def validate_withholding_quota(base: Any, rate: Any, declared: Any) -> bool:
    return _within_tolerance(withholding_quota(base, rate), declared)


def validate_document_total(base: Any, vat: Any, withholding: Any, declared: Any) -> bool:
    return _within_tolerance(document_total(base, vat, withholding), declared)


def quote_invoice(base: Any, vat_rate: Any, withholding_rate: Any = 0) -> dict[str, Decimal]:
    amount = to_amount(base, field="base")
    vat = vat_quota(amount, vat_rate)
    withheld = withholding_quota(amount, withholding_rate)
    return {
        "base": amount,
        "vat_quota": vat,
        "withholding_quota": withheld,
        "total": document_total(amount, vat, withheld),
    }


__all__ = [
    "VAT_SUPER_REDUCED",
    "VAT_REDUCED",
    "VAT_GENERAL",
    "VAT_RATES",
    "WITHHOLDING_RATES",
    "RENTAL_WITHHOLDING_RATE",
    "QUOTA_TOLERANCE",
    "check_vat_rate",
    "check_withholding_rate",
    "vat_quota",
    "withholding_quota",
    "rental_withholding",
    "document_total",
    "expense_total",
    "validate_vat_quota",
    "validate_withholding_quota",
    "validate_document_total",
    "quote_invoice",
]
