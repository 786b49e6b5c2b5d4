from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .errors import InvalidAmount, UnsupportedRate
from .money import D, ZERO, round2, to_decimal, to_rounded


@dataclass(frozen=True)
class RateBand:
    up_to: Decimal | None
    rate: Decimal


# Combined state and regional scale used to estimate the marginal rate.
INCOME_TAX_SCALE: tuple[RateBand, ...] = (
    RateBand(D("12450"), D("19")),
    RateBand(D("20200"), D("24")),
    RateBand(D("35200"), D("30")),
    RateBand(D("60000"), D("37")),
    RateBand(D("300000"), D("45")),
    RateBand(None, D("47")),
)


def estimate_marginal_rate(annual_net_income: Any) -> Decimal:
    income = to_rounded(annual_net_income, field="annual_net_income")
    for band in INCOME_TAX_SCALE:
        if band.up_to is None or income <= band.up_to:
            return band.rate
    return INCOME_TAX_SCALE[-1].rate  # pragma: no cover - last band is open


def withholding_gap(annual_net_income: Any, current_rate: Any) -> Decimal:
    """Extra income tax owed because the withholding rate sits below the marginal rate."""
    income = to_rounded(annual_net_income, field="annual_net_income")
    rate = to_decimal(current_rate)
    if rate is None or not rate.is_finite() or rate < 0 or rate > 100:
        raise UnsupportedRate(f"current_rate must be a percentage, got {current_rate!r}", field="current_rate")
    withheld = round2(income * rate / D("100"))
    estimated = round2(income * estimate_marginal_rate(income) / D("100"))
    return round2(estimated - withheld)


@dataclass(frozen=True)
class RealBalance:
    bank_balance: Decimal
    vat_pending: Decimal
    withholding_gap: Decimal
    social_security_pending: Decimal
    balance: Decimal
    difference: Decimal


def real_balance(
    bank_balance: Any,
    vat_pending: Any,
    income_tax_gap: Any,
    social_security_pending: Any = 0,
) -> RealBalance:
    bank = to_rounded(bank_balance, field="bank_balance")
    vat = to_rounded(vat_pending, field="vat_pending")
    gap = to_rounded(income_tax_gap, field="withholding_gap")
    ss = to_rounded(social_security_pending, field="social_security_pending")
    balance = round2(bank - vat - gap - ss)
    return RealBalance(
        bank_balance=bank,
        vat_pending=vat,
        withholding_gap=gap,
        social_security_pending=ss,
        balance=balance,
        difference=round2(bank - balance),
    )


def _useful_life(years: Any) -> Decimal:
    value = to_decimal(years)
    if value is None or not value.is_finite() or value <= 0:
        raise InvalidAmount(f"useful_life_years must be positive, got {years!r}", field="useful_life_years")
    return value


def annual_amortization(acquisition_cost: Any, useful_life_years: Any) -> Decimal:
    return round2(to_rounded(acquisition_cost, field="acquisition_cost") / _useful_life(useful_life_years))


def amortization_percentage(useful_life_years: Any) -> Decimal:
    return round2(D("100") / _useful_life(useful_life_years))


def residual_value(acquisition_cost: Any, accumulated_amortization: Any) -> Decimal:
    cost = to_rounded(acquisition_cost, field="acquisition_cost")
    accumulated = to_rounded(accumulated_amortization, field="accumulated_amortization")
    return max(ZERO, round2(cost - accumulated))


__all__ = [
    "RateBand",
    "INCOME_TAX_SCALE",
    "estimate_marginal_rate",
    "withholding_gap",
    "RealBalance",
    "real_balance",
    "annual_amortization",
    "amortization_percentage",
    "residual_value",
]
