"""Year-to-date figures for the quarterly income-tax prepayment.

The prepayment is computed on cumulative figures from January 1 to the end of
the declared quarter. Payments already made in earlier quarters of the same
year are subtracted, but only the positive ones: a quarter that came out
negative never reduces what later quarters owe.

Everything here is a function of the per-quarter vectors passed in. No state
survives between calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from .errors import InvalidPeriod
from .money import D, ZERO, round2, sum_amounts, to_amount
from .periods import check_quarter

PREPAYMENT_RATE = D("0.20")


@dataclass(frozen=True)
class QuarterFigures:
    income: Decimal = ZERO
    deductible_expense: Decimal = ZERO
    withholding: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("income", "deductible_expense", "withholding"):
            object.__setattr__(self, name, to_amount(getattr(self, name), field=name))

    @classmethod
    def of(cls, income: Any = 0, deductible_expense: Any = 0, withholding: Any = 0) -> "QuarterFigures":
        return cls(income=income, deductible_expense=deductible_expense, withholding=withholding)


@dataclass(frozen=True)
class AccumulatedPosition:
    quarter: int
    accumulated_income: Decimal
    accumulated_expense: Decimal
    net_result: Decimal
    tentative_quota: Decimal
    prior_positive_payments: Decimal
    accumulated_withholding: Decimal
    result: Decimal


def quarters_from_vectors(
    income: Sequence[Any],
    deductible_expense: Sequence[Any],
    withholding: Sequence[Any] | None = None,
) -> tuple[QuarterFigures, ...]:
    """Zip per-quarter sums into QuarterFigures; withholding defaults to zeros."""
    if withholding is None:
        withholding = [0] * len(income)
    if not len(income) == len(deductible_expense) == len(withholding):
        raise InvalidPeriod("Quarterly vectors must have the same length", field="quarters")
    return tuple(
        QuarterFigures.of(i, e, w) for i, e, w in zip(income, deductible_expense, withholding)
    )


def _window(quarters: Sequence[QuarterFigures], quarter: int) -> Sequence[QuarterFigures]:
    check_quarter(quarter)
    if len(quarters) < quarter:
        raise InvalidPeriod(
            f"Figures supplied for {len(quarters)} quarter(s); quarter {quarter} needs {quarter}",
            field="quarter",
        )
    return quarters[:quarter]


def accumulated_income(quarters: Sequence[QuarterFigures], quarter: int) -> Decimal:
    return sum_amounts(q.income for q in _window(quarters, quarter))


def accumulated_expense(quarters: Sequence[QuarterFigures], quarter: int) -> Decimal:
    return sum_amounts(q.deductible_expense for q in _window(quarters, quarter))


def accumulated_withholding(quarters: Sequence[QuarterFigures], quarter: int) -> Decimal:
    return sum_amounts(q.withholding for q in _window(quarters, quarter))


def net_result(quarters: Sequence[QuarterFigures], quarter: int) -> Decimal:
    return round2(accumulated_income(quarters, quarter) - accumulated_expense(quarters, quarter))


def tentative_quota(quarters: Sequence[QuarterFigures], quarter: int, rate: Decimal = PREPAYMENT_RATE) -> Decimal:
    net = net_result(quarters, quarter)
    return round2(net * rate) if net > 0 else ZERO


def prior_positive_payments(
    quarters: Sequence[QuarterFigures],
    quarter: int,
    rate: Decimal = PREPAYMENT_RATE,
) -> Decimal:
    _window(quarters, quarter)
    paid = ZERO
    for earlier in range(1, quarter):
        outcome = round2(
            tentative_quota(quarters, earlier, rate) - paid - accumulated_withholding(quarters, earlier)
        )
        if outcome > 0:
            paid = round2(paid + outcome)
    return paid


def accumulate(
    quarters: Sequence[QuarterFigures],
    quarter: int,
    rate: Decimal = PREPAYMENT_RATE,
) -> AccumulatedPosition:
    income = accumulated_income(quarters, quarter)
    expense = accumulated_expense(quarters, quarter)
    quota = tentative_quota(quarters, quarter, rate)
    prior = prior_positive_payments(quarters, quarter, rate)
    withheld = accumulated_withholding(quarters, quarter)
    return AccumulatedPosition(
        quarter=quarter,
        accumulated_income=income,
        accumulated_expense=expense,
        net_result=round2(income - expense),
        tentative_quota=quota,
        prior_positive_payments=prior,
        accumulated_withholding=withheld,
        result=round2(quota - prior - withheld),
    )


def accumulate_year(
    quarters: Sequence[QuarterFigures],
    rate: Decimal = PREPAYMENT_RATE,
) -> tuple[AccumulatedPosition, ...]:
    if not 1 <= len(quarters) <= 4:
        raise InvalidPeriod(f"Expected figures for 1-4 quarters, got {len(quarters)}", field="quarters")
    return tuple(accumulate(quarters, q, rate) for q in range(1, len(quarters) + 1))


__all__ = [
    "PREPAYMENT_RATE",
    "QuarterFigures",
    "AccumulatedPosition",
    "quarters_from_vectors",
    "accumulated_income",
    "accumulated_expense",
    "accumulated_withholding",
    "net_result",
    "tentative_quota",
    "prior_positive_payments",
    "accumulate",
    "accumulate_year",
]
