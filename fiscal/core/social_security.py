from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from .money import D, ZERO, round2, to_base, to_rounded

# Aggregate self-employed contribution rate: common contingencies 28.3,
# occupational accidents 1.3, cessation 0.9, training 0.1 and MEI 0.9.
TOTAL_CONTRIBUTION_RATE = D("0.315")
MEI_RATE = D("0.009")
FLAT_RATE_AMOUNT = D("80.00")
DEFAULT_CONTRIBUTION_BASE = D("950.98")


@dataclass(frozen=True)
class ContributionBracket:
    tier: int
    income_from: Decimal
    income_to: Decimal | None
    min_base: Decimal
    max_base: Decimal
    reduced_table: bool

    def covers(self, monthly_net_income: Decimal) -> bool:
        if monthly_net_income < self.income_from:
            return False
        return self.income_to is None or monthly_net_income <= self.income_to


def _bracket(tier, income_from, income_to, min_base, max_base, reduced) -> ContributionBracket:
    return ContributionBracket(
        tier=tier,
        income_from=D(income_from),
        income_to=D(income_to) if income_to is not None else None,
        min_base=D(min_base),
        max_base=D(max_base),
        reduced_table=reduced,
    )


CONTRIBUTION_BRACKETS_2026: tuple[ContributionBracket, ...] = (
    # Reduced table
    _bracket(1, "0.00", "670.00", "653.59", "718.94", True),
    _bracket(2, "670.01", "900.00", "718.95", "900.00", True),
    _bracket(3, "900.01", "1166.70", "849.67", "1166.70", True),
    _bracket(4, "1166.71", "1300.00", "960.50", "1300.00", True),
    _bracket(5, "1300.01", "1500.00", "970.40", "1500.00", True),
    _bracket(6, "1500.01", "1700.00", "970.40", "1700.00", True),
    # General table
    _bracket(7, "1700.01", "1850.00", "1161.90", "1850.00", False),
    _bracket(8, "1850.01", "2030.00", "1227.30", "2030.00", False),
    _bracket(9, "2030.01", "2330.00", "1293.60", "2330.00", False),
    _bracket(10, "2330.01", "2760.00", "1383.30", "2760.00", False),
    _bracket(11, "2760.01", "3190.00", "1466.70", "3190.00", False),
    _bracket(12, "3190.01", "3620.00", "1549.00", "3620.00", False),
    _bracket(13, "3620.01", "4050.00", "1641.30", "4050.00", False),
    _bracket(14, "4050.01", "6000.00", "1775.30", "5101.20", False),
    _bracket(15, "6000.01", None, "1976.40", "5101.20", False),
)


def _assert_contiguous(table: tuple[ContributionBracket, ...]) -> None:
    if not table or table[0].income_from != ZERO:
        raise RuntimeError("Contribution table must start at zero income")
    for previous, current in zip(table, table[1:]):
        if previous.income_to is None or current.income_from != previous.income_to + D("0.01"):
            raise RuntimeError(f"Gap or overlap between contribution tiers {previous.tier} and {current.tier}")
    if table[-1].income_to is not None:
        raise RuntimeError("Contribution table must be open-ended")


_assert_contiguous(CONTRIBUTION_BRACKETS_2026)


def contribution_brackets() -> tuple[ContributionBracket, ...]:
    return CONTRIBUTION_BRACKETS_2026


def bracket_for(monthly_net_income: Any) -> ContributionBracket:
    """Bracket matching a monthly net income.

    Income is rounded to the cent so every value lands in exactly one tier;
    losses fall into the first tier.
    """
    income = max(ZERO, to_rounded(monthly_net_income, field="monthly_net_income"))
    for bracket in CONTRIBUTION_BRACKETS_2026:
        if bracket.covers(income):
            return bracket
    return CONTRIBUTION_BRACKETS_2026[-1]  # pragma: no cover - table is open-ended


def suggested_base_range(monthly_net_income: Any) -> tuple[Decimal, Decimal]:
    bracket = bracket_for(monthly_net_income)
    return bracket.min_base, bracket.max_base


def quota_for_base(base: Any) -> Decimal:
    return round2(to_base(base, field="contribution_base") * TOTAL_CONTRIBUTION_RATE)


class ContributionPath(str, Enum):
    FLAT_RATE = "flat_rate"
    STANDARD = "standard"


@dataclass(frozen=True)
class SocialSecurityQuote:
    path: ContributionPath
    base: Decimal
    main_quota: Decimal
    supplementary_quota: Decimal
    total: Decimal
    bracket: ContributionBracket


def _effective_base(chosen_base: Any) -> Decimal:
    if chosen_base is None:
        return DEFAULT_CONTRIBUTION_BASE
    base = to_base(chosen_base, field="contribution_base")
    return base if base > 0 else DEFAULT_CONTRIBUTION_BASE


def quote_social_security(
    monthly_net_income: Any,
    flat_rate: bool = False,
    chosen_base: Any = None,
) -> SocialSecurityQuote:
    """Monthly self-employed contribution.

    The bracket for ``monthly_net_income`` is reported alongside the quote but
    does not select the base: the chosen base, or the statutory default, does.
    """
    bracket = bracket_for(monthly_net_income)
    base = _effective_base(chosen_base)
    if flat_rate:
        mei = round2(base * MEI_RATE)
        return SocialSecurityQuote(
            path=ContributionPath.FLAT_RATE,
            base=base,
            main_quota=FLAT_RATE_AMOUNT,
            supplementary_quota=mei,
            total=round2(FLAT_RATE_AMOUNT + mei),
            bracket=bracket,
        )
    quota = quota_for_base(base)
    return SocialSecurityQuote(
        path=ContributionPath.STANDARD,
        base=base,
        main_quota=quota,
        supplementary_quota=ZERO,
        total=quota,
        bracket=bracket,
    )


def social_security_quota(monthly_net_income: Any, flat_rate: bool = False, chosen_base: Any = None) -> Decimal:
    return quote_social_security(monthly_net_income, flat_rate, chosen_base).total


__all__ = [
    "TOTAL_CONTRIBUTION_RATE",
    "MEI_RATE",
    "FLAT_RATE_AMOUNT",
    "DEFAULT_CONTRIBUTION_BASE",
    "CONTRIBUTION_BRACKETS_2026",
    "ContributionBracket",
    "ContributionPath",
    "SocialSecurityQuote",
    "contribution_brackets",
    "bracket_for",
    "suggested_base_range",
    "quota_for_base",
    "quote_social_security",
    "social_security_quota",
]
