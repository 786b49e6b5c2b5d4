from __future__ import annotations

import logging
from decimal import Decimal
from typing import ClassVar, Sequence

from pydantic import BaseModel, ConfigDict

from fiscal.core.money import round2, sum_amounts

from .base import AnnualBoxSet, QuarterLine, check_annual_inputs, reconciles
from .modelo303 import Modelo303BoxSet, VatBreakdown, VatTier

logger = logging.getLogger("fiscal.declarations")


class AnnualVatTotals(BaseModel):
    collected: VatBreakdown
    deductible: VatBreakdown

    model_config = ConfigDict(frozen=True)


class Modelo390BoxSet(AnnualBoxSet):
    FORM: ClassVar[str] = "390"
    BOX_FIELDS: ClassVar[tuple[str, ...]] = (
        "collected_base",
        "collected_quota",
        "deductible_base",
        "deductible_quota",
        "annual_total",
    )

    collected_base: Decimal
    collected_quota: Decimal
    deductible_base: Decimal
    deductible_quota: Decimal
    totals: AnnualVatTotals


def _sum_tier(tiers: Sequence[VatTier]) -> VatTier:
    return VatTier(base=sum_amounts(t.base for t in tiers), quota=sum_amounts(t.quota for t in tiers))


def _sum_breakdowns(breakdowns: Sequence[VatBreakdown]) -> VatBreakdown:
    return VatBreakdown(
        super_reduced=_sum_tier([b.super_reduced for b in breakdowns]),
        reduced=_sum_tier([b.reduced for b in breakdowns]),
        general=_sum_tier([b.general for b in breakdowns]),
    )


def build_annual_vat_summary(returns: Sequence[Modelo303BoxSet]) -> Modelo390BoxSet:
    """Annual VAT summary; per-tier totals and a check against the quarterly results."""
    year, ordered = check_annual_inputs(returns, "303")
    collected = _sum_breakdowns([r.collected for r in ordered])
    deductible = _sum_breakdowns([r.deductible for r in ordered])
    annual_result = round2(collected.total_quota - deductible.total_quota)
    quarterly_total = sum_amounts(r.result for r in ordered)
    difference, ok = reconciles(annual_result, quarterly_total)
    if not ok:
        logger.warning(
            "390 for %s does not reconcile with its 303s: annual=%s quarterly=%s",
            year,
            annual_result,
            quarterly_total,
        )
    return Modelo390BoxSet(
        year=year,
        collected_base=collected.total_base,
        collected_quota=collected.total_quota,
        deductible_base=deductible.total_base,
        deductible_quota=deductible.total_quota,
        annual_total=annual_result,
        quarterly_total=quarterly_total,
        difference=difference,
        reconciled=ok,
        quarters=tuple(
            QuarterLine(
                quarter=r.quarter,
                base=r.collected.total_base,
                quota=round2(r.box_27 - r.box_45),
                result=r.result,
            )
            for r in ordered
        ),
        totals=AnnualVatTotals(collected=collected, deductible=deductible),
    )


__all__ = ["AnnualVatTotals", "Modelo390BoxSet", "build_annual_vat_summary"]
