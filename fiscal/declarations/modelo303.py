from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

from fiscal.core.money import ZERO, round2, sum_amounts, to_amount, to_base
from fiscal.core.quotas import VAT_GENERAL, VAT_REDUCED, VAT_SUPER_REDUCED, check_vat_rate, vat_quota

from .base import FilingAction, QuarterlyBoxSet, action_for, check_quarterly_period

logger = logging.getLogger("fiscal.declarations")


def _quantize(value: Decimal) -> Decimal:
    return round2(value)


class VatTier(BaseModel):
    base: Decimal = ZERO
    quota: Decimal = ZERO

    model_config = ConfigDict(frozen=True)

    _quantize_fields = field_validator("base", "quota", mode="after")(_quantize)

    @classmethod
    def from_base(cls, base: Any, rate: Any) -> "VatTier":
        return cls(base=to_base(base), quota=vat_quota(base, rate))


class VatBreakdown(BaseModel):
    """Base and quota per VAT tier (4%, 10% and 21%)."""

    super_reduced: VatTier = VatTier()
    reduced: VatTier = VatTier()
    general: VatTier = VatTier()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_bases(cls, super_reduced: Any = 0, reduced: Any = 0, general: Any = 0) -> "VatBreakdown":
        return cls(
            super_reduced=VatTier.from_base(super_reduced, VAT_SUPER_REDUCED),
            reduced=VatTier.from_base(reduced, VAT_REDUCED),
            general=VatTier.from_base(general, VAT_GENERAL),
        )

    def tiers(self) -> tuple[tuple[Decimal, VatTier], ...]:
        return (
            (VAT_SUPER_REDUCED, self.super_reduced),
            (VAT_REDUCED, self.reduced),
            (VAT_GENERAL, self.general),
        )

    def tier(self, rate: Any) -> VatTier:
        rate = check_vat_rate(rate)
        for tier_rate, amounts in self.tiers():
            if tier_rate == rate:
                return amounts
        raise AssertionError("unreachable")  # pragma: no cover

    @property
    def total_base(self) -> Decimal:
        return sum_amounts(t.base for _, t in self.tiers())

    @property
    def total_quota(self) -> Decimal:
        return sum_amounts(t.quota for _, t in self.tiers())


class Modelo303BoxSet(QuarterlyBoxSet):
    FORM: ClassVar[str] = "303"
    BOX_FIELDS: ClassVar[tuple[str, ...]] = (
        "box_01",
        "box_02",
        "box_03",
        "box_04",
        "box_05",
        "box_06",
        "box_07",
        "box_08",
        "box_09",
        "box_27",
        "box_28",
        "box_29",
        "box_45",
        "box_46",
        "box_66",
        "box_69",
        "box_71",
        "box_72",
    )

    # Accrued VAT: base, rate and quota per tier.
    box_01: Decimal
    box_02: Decimal = VAT_SUPER_REDUCED
    box_03: Decimal
    box_04: Decimal
    box_05: Decimal = VAT_REDUCED
    box_06: Decimal
    box_07: Decimal
    box_08: Decimal = VAT_GENERAL
    box_09: Decimal
    box_27: Decimal
    # Deductible VAT.
    box_28: Decimal
    box_29: Decimal
    box_45: Decimal
    # Result.
    box_46: Decimal
    box_66: Decimal = ZERO
    box_69: Decimal
    box_71: Decimal
    box_72: Decimal

    collected: VatBreakdown
    deductible: VatBreakdown

    @property
    def total_collected(self) -> Decimal:
        return self.box_27

    @property
    def total_deductible(self) -> Decimal:
        return self.box_45


def build_vat_return(
    collected: VatBreakdown,
    deductible: VatBreakdown,
    quarter: int,
    year: int,
    prior_offsets: Any = 0,
) -> Modelo303BoxSet:
    """Quarterly VAT return.

    ``prior_offsets`` is the negative balance carried from earlier periods that
    the filer chooses to apply this quarter (box 66).
    """
    check_quarterly_period(quarter, year)
    offsets = to_base(prior_offsets, field="prior_offsets")
    accrued = collected.total_quota
    deductible_total = deductible.total_quota
    regime_result = round2(accrued - deductible_total)
    result = round2(regime_result - offsets)
    box_set = Modelo303BoxSet(
        year=year,
        quarter=quarter,
        box_01=collected.super_reduced.base,
        box_03=collected.super_reduced.quota,
        box_04=collected.reduced.base,
        box_06=collected.reduced.quota,
        box_07=collected.general.base,
        box_09=collected.general.quota,
        box_27=accrued,
        box_28=deductible.total_base,
        box_29=deductible_total,
        box_45=deductible_total,
        box_46=regime_result,
        box_66=offsets,
        box_69=result,
        box_71=result if result > 0 else ZERO,
        box_72=-result if result < 0 else ZERO,
        result=result,
        action=action_for(result),
        collected=collected,
        deductible=deductible,
    )
    logger.debug("Built 303 %sT %s result=%s action=%s", quarter, year, result, box_set.action.value)
    return box_set


def simple_vat_result(collected_quota: Any, deductible_quota: Any) -> tuple[Decimal, FilingAction]:
    """Result and action from total collected and paid VAT, without the tier breakdown."""
    result = round2(to_amount(collected_quota, field="collected_quota") - to_amount(deductible_quota, field="deductible_quota"))
    return result, action_for(result)


__all__ = [
    "VatTier",
    "VatBreakdown",
    "Modelo303BoxSet",
    "build_vat_return",
    "simple_vat_result",
]
