from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, ClassVar, Sequence

from pydantic import BaseModel, ConfigDict, field_validator

from fiscal.core.identity import normalize_tax_id
from fiscal.core.money import ZERO, round2, sum_amounts, to_base
from fiscal.core.quotas import RENTAL_WITHHOLDING_RATE

from .base import QuarterlyBoxSet, action_for, check_quarterly_period

logger = logging.getLogger("fiscal.declarations")


class RentalPayment(BaseModel):
    """Rent paid for business premises during the quarter."""

    payee_tax_id: str
    base: Decimal
    property_reference: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("payee_tax_id", mode="after")
    @classmethod
    def _normalize_payee(cls, value: str) -> str:
        return normalize_tax_id(value)

    @field_validator("base", mode="after")
    @classmethod
    def _check_base(cls, value: Decimal) -> Decimal:
        return to_base(value, field="base")


class Modelo115BoxSet(QuarterlyBoxSet):
    FORM: ClassVar[str] = "115"
    BOX_FIELDS: ClassVar[tuple[str, ...]] = ("box_01", "box_02", "box_03", "box_04", "box_05")

    box_01: int  # distinct payees
    box_02: Decimal  # rental base
    box_03: Decimal  # withholding at 19%
    box_04: Decimal = ZERO  # amount already paid, for amended filings
    box_05: Decimal  # result
    payees: tuple[str, ...] = ()


def build_rental_withholding_return(
    payments: Sequence[RentalPayment],
    quarter: int,
    year: int,
    correction: Any = 0,
) -> Modelo115BoxSet:
    check_quarterly_period(quarter, year)
    amendment = to_base(correction, field="correction")
    payees = tuple(sorted({p.payee_tax_id for p in payments}))
    base = sum_amounts(p.base for p in payments)
    withholding = round2(base * RENTAL_WITHHOLDING_RATE / Decimal("100"))
    result = round2(withholding - amendment)
    box_set = Modelo115BoxSet(
        year=year,
        quarter=quarter,
        box_01=len(payees),
        box_02=base,
        box_03=withholding,
        box_04=amendment,
        box_05=result,
        result=result,
        action=action_for(result),
        payees=payees,
    )
    logger.debug("Built 115 %sT %s payees=%s result=%s", quarter, year, len(payees), result)
    return box_set


__all__ = ["RentalPayment", "Modelo115BoxSet", "build_rental_withholding_return"]
