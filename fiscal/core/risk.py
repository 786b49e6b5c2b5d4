from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from .errors import InvalidAmount
from .money import D, ZERO, round2, to_decimal, to_rounded

DEPENDENCY_THRESHOLD = D("75")
CRITICAL_DEPENDENCY_THRESHOLD = D("85")

DEPENDENCY_POINTS = 40
CRITICAL_DEPENDENCY_POINTS = 20
MISSING_INDEPENDENCE_POINTS = 30
HIGH_RISK_EXPENSE_POINTS = 5

# Upper bounds (exclusive) per tier; anything above the last is CRITICAL.
_TIER_LIMITS = ((25, "LOW"), (50, "MEDIUM"), (75, "HIGH"))


class RiskTier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class RiskFactor:
    name: str
    points: int
    description: str


@dataclass(frozen=True)
class RiskScore:
    score: int
    tier: RiskTier
    factors: tuple[RiskFactor, ...] = field(default_factory=tuple)


def tier_for(score: int) -> RiskTier:
    for limit, name in _TIER_LIMITS:
        if score < limit:
            return RiskTier(name)
    return RiskTier.CRITICAL


def _check_percentage(value: Any) -> Decimal:
    pct = to_decimal(value)
    if pct is None or not pct.is_finite() or pct < 0 or pct > 100:
        raise InvalidAmount(f"dependency_percentage must be between 0 and 100, got {value!r}", field="dependency_percentage")
    return pct


def score_dependency_risk(
    dependency_percentage: Any,
    has_independence_expenses: bool,
    high_risk_expense_count: int = 0,
) -> RiskScore:
    """Score how exposed a self-employed worker is to economic-dependence rules.

    Each triggered rule contributes a factor with its points so the caller can
    explain the score, not only show it.
    """
    pct = _check_percentage(dependency_percentage)
    if isinstance(high_risk_expense_count, bool) or not isinstance(high_risk_expense_count, int) or high_risk_expense_count < 0:
        raise InvalidAmount("high_risk_expense_count must be a non-negative integer", field="high_risk_expense_count")

    factors: list[RiskFactor] = []
    if pct >= DEPENDENCY_THRESHOLD:
        factors.append(
            RiskFactor(
                "dependency_over_75",
                DEPENDENCY_POINTS,
                f"{pct.quantize(D('0.1'))}% of billing comes from a single client",
            )
        )
    if pct >= CRITICAL_DEPENDENCY_THRESHOLD:
        factors.append(
            RiskFactor(
                "dependency_over_85",
                CRITICAL_DEPENDENCY_POINTS,
                "Critical dependency on a single client",
            )
        )
    if not has_independence_expenses:
        factors.append(
            RiskFactor(
                "missing_independence_expenses",
                MISSING_INDEPENDENCE_POINTS,
                "Rent, electricity or internet invoices in your own name are missing this month",
            )
        )
    if high_risk_expense_count > 0:
        factors.append(
            RiskFactor(
                "high_risk_expenses",
                high_risk_expense_count * HIGH_RISK_EXPENSE_POINTS,
                f"{high_risk_expense_count} questionable expense(s) flagged this year",
            )
        )
    score = sum(f.points for f in factors)
    return RiskScore(score=score, tier=tier_for(score), factors=tuple(factors))


def dependency_percentage(main_client_billing: Any, total_billing: Any) -> Decimal:
    main = to_rounded(main_client_billing, field="main_client_billing")
    total = to_rounded(total_billing, field="total_billing")
    if total == 0:
        return ZERO
    return round2(main / total * D("100"))


def is_economically_dependent(percentage: Any) -> bool:
    return _check_percentage(percentage) >= DEPENDENCY_THRESHOLD


def dependency_alert(kind: str, **details: Any) -> dict[str, str]:
    """Title, description and recommendation for a compliance alert."""
    if kind == "MISSING_INDEPENDENCE_EXPENSE":
        return {
            "title": "Missing independence expense",
            "description": (
                f"No {details.get('expense_type', 'expense')} for "
                f"{details.get('month', '?')}/{details.get('year', '?')} has been registered in your name."
            ),
            "recommendation": (
                "With premises rented to a dependent self-employed worker you must show independence "
                "from the client. Upload the invoice in your name as soon as possible."
            ),
        }
    if kind == "EXCESSIVE_DEPENDENCY":
        return {
            "title": "Excessive dependency on one client",
            "description": (
                f"Your main client accounts for {details.get('percentage', '?')}% of billing, "
                f"above the {DEPENDENCY_THRESHOLD}% limit."
            ),
            "recommendation": "Look for a second client to diversify income and lower the fiscal risk.",
        }
    if kind == "HIGH_RISK_EXPENSE":
        return {
            "title": "High-risk expense detected",
            "description": str(details.get("description", "An expense needs additional justification.")),
            "recommendation": "Keep adequate justification and supporting documents for this expense.",
        }
    return {
        "title": "Compliance alert",
        "description": "A situation that needs your attention was detected.",
        "recommendation": "Review the details and take the necessary action.",
    }


__all__ = [
    "DEPENDENCY_THRESHOLD",
    "CRITICAL_DEPENDENCY_THRESHOLD",
    "RiskTier",
    "RiskFactor",
    "RiskScore",
    "tier_for",
    "score_dependency_risk",
    "dependency_percentage",
    "is_economically_dependent",
    "dependency_alert",
]
