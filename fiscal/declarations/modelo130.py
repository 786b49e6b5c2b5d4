from __future__ import annotations

import logging
from decimal import Decimal
from typing import ClassVar, Sequence

from fiscal.core.accumulation import PREPAYMENT_RATE, AccumulatedPosition, QuarterFigures, accumulate

from .base import QuarterlyBoxSet, action_for, check_quarterly_period

logger = logging.getLogger("fiscal.declarations")


class Modelo130BoxSet(QuarterlyBoxSet):
    FORM: ClassVar[str] = "130"
    BOX_FIELDS: ClassVar[tuple[str, ...]] = (
        "box_01",
        "box_02",
        "box_03",
        "box_04",
        "box_05",
        "box_06",
        "box_07",
    )

    box_01: Decimal  # accumulated income
    box_02: Decimal  # accumulated deductible expense
    box_03: Decimal  # net result
    box_04: Decimal  # 20% of a positive net result
    box_05: Decimal  # prior positive payments this year
    box_06: Decimal  # accumulated withholding
    box_07: Decimal  # result


def from_position(position: AccumulatedPosition, year: int) -> Modelo130BoxSet:
    return Modelo130BoxSet(
        year=year,
        quarter=position.quarter,
        box_01=position.accumulated_income,
        box_02=position.accumulated_expense,
        box_03=position.net_result,
        box_04=position.tentative_quota,
        box_05=position.prior_positive_payments,
        box_06=position.accumulated_withholding,
        box_07=position.result,
        result=position.result,
        action=action_for(position.result),
    )


def build_prepayment_return(
    quarters: Sequence[QuarterFigures],
    quarter: int,
    year: int,
    rate: Decimal = PREPAYMENT_RATE,
) -> Modelo130BoxSet:
    """Quarterly income-tax prepayment from the per-quarter sums of the year so far."""
    check_quarterly_period(quarter, year)
    box_set = from_position(accumulate(quarters, quarter, rate), year)
    logger.debug(
        "Built 130 %sT %s prior_payments=%s result=%s", quarter, year, box_set.box_05, box_set.result
    )
    return box_set


__all__ = ["Modelo130BoxSet", "from_position", "build_prepayment_return"]
