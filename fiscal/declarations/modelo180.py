"""Annual summary of rental withholding, built from the year's 115 returns."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import ClassVar, Sequence

from fiscal.core.money import round2, sum_amounts
from fiscal.core.quotas import RENTAL_WITHHOLDING_RATE

from .base import AnnualBoxSet, QuarterLine, check_annual_inputs, reconciles
from .modelo115 import Modelo115BoxSet

logger = logging.getLogger("fiscal.declarations")


class Modelo180BoxSet(AnnualBoxSet):
    FORM: ClassVar[str] = "180"
    BOX_FIELDS: ClassVar[tuple[str, ...]] = ("payee_count", "total_base", "annual_total")

    payee_count: int
    total_base: Decimal
    payees: tuple[str, ...]


def build_annual_rental_summary(returns: Sequence[Modelo115BoxSet]) -> Modelo180BoxSet:
    """Recompute the year's withholding from the aggregated base.

    A mismatch with the sum of the quarterly results is reported through
    ``difference`` and ``reconciled``, never corrected.
    """
    year, ordered = check_annual_inputs(returns, "115")
    payees = tuple(sorted({p for r in ordered for p in r.payees}))
    total_base = sum_amounts(r.box_02 for r in ordered)
    annual_withholding = round2(total_base * RENTAL_WITHHOLDING_RATE / Decimal("100"))
    quarterly_total = sum_amounts(r.box_05 for r in ordered)
    difference, ok = reconciles(annual_withholding, quarterly_total)
    if not ok:
        logger.warning(
            "180 for %s does not reconcile with its 115s: annual=%s quarterly=%s",
            year,
            annual_withholding,
            quarterly_total,
        )
    return Modelo180BoxSet(
        year=year,
        payee_count=len(payees),
        total_base=total_base,
        annual_total=annual_withholding,
        quarterly_total=quarterly_total,
        difference=difference,
        reconciled=ok,
        quarters=tuple(
            QuarterLine(quarter=r.quarter, base=r.box_02, quota=r.box_03, result=r.result) for r in ordered
        ),
        payees=payees,
    )


__all__ = ["Modelo180BoxSet", "build_annual_rental_summary"]
