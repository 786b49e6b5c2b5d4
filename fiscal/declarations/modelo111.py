from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Sequence

from pydantic import BaseModel, ConfigDict, field_validator

from fiscal.core.identity import normalize_tax_id
from fiscal.core.money import ZERO, round2, sum_amounts, to_base

from .base import QuarterlyBoxSet, action_for, check_quarterly_period

logger = logging.getLogger("fiscal.declarations")


class PayeeKind(str, Enum):
    WORKER = "WORKER"
    PROFESSIONAL = "PROFESSIONAL"
    PRIZE = "PRIZE"


class WithheldPayment(BaseModel):
    payee_tax_id: str
    kind: PayeeKind
    base: Decimal
    withholding: Decimal

    model_config = ConfigDict(frozen=True)

    @field_validator("payee_tax_id", mode="after")
    @classmethod
    def _normalize_payee(cls, value: str) -> str:
        return normalize_tax_id(value)

    @field_validator("base", "withholding", mode="after")
    @classmethod
    def _check_amount(cls, value: Decimal) -> Decimal:
        return to_base(value, field="amount")


class Modelo111BoxSet(QuarterlyBoxSet):
    FORM: ClassVar[str] = "111"
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
        "box_28",
        "box_29",
        "box_30",
    )

    # Employment income.
    box_01: int
    box_02: Decimal
    box_03: Decimal
    # Professional activities.
    box_04: int
    box_05: Decimal
    box_06: Decimal
    # Prizes.
    box_07: int
    box_08: Decimal
    box_09: Decimal
    box_28: Decimal
    box_29: Decimal = ZERO
    box_30: Decimal


def _group(payments: Sequence[WithheldPayment], kind: PayeeKind) -> tuple[int, Decimal, Decimal]:
    selected = [p for p in payments if p.kind is kind]
    return (
        len({p.payee_tax_id for p in selected}),
        sum_amounts(p.base for p in selected),
        sum_amounts(p.withholding for p in selected),
    )


def build_withholding_return(
    payments: Sequence[WithheldPayment],
    quarter: int,
    year: int,
    correction: Any = 0,
) -> Modelo111BoxSet:
    """Quarterly return for income tax withheld from workers, professionals and prizes."""
    check_quarterly_period(quarter, year)
    amendment = to_base(correction, field="correction")
    workers = _group(payments, PayeeKind.WORKER)
    professionals = _group(payments, PayeeKind.PROFESSIONAL)
    prizes = _group(payments, PayeeKind.PRIZE)
    withheld = round2(workers[2] + professionals[2] + prizes[2])
    result = round2(withheld - amendment)
    box_set = Modelo111BoxSet(
        year=year,
        quarter=quarter,
        box_01=workers[0],
        box_02=workers[1],
        box_03=workers[2],
        box_04=professionals[0],
        box_05=professionals[1],
        box_06=professionals[2],
        box_07=prizes[0],
        box_08=prizes[1],
        box_09=prizes[2],
        box_28=withheld,
        box_29=amendment,
        box_30=result,
        result=result,
        action=action_for(result),
    )
    logger.debug("Built 111 %sT %s result=%s", quarter, year, result)
    return box_set


__all__ = ["PayeeKind", "WithheldPayment", "Modelo111BoxSet", "build_withholding_return"]
