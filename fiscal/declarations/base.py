from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

from fiscal.core.errors import InvalidPeriod
from fiscal.core.money import round2
from fiscal.core.periods import check_quarter, check_year

RECONCILIATION_TOLERANCE = Decimal("0.02")


class FilingAction(str, Enum):
    TO_PAY = "TO_PAY"
    TO_OFFSET = "TO_OFFSET"
    NO_ACTIVITY = "NO_ACTIVITY"


def action_for(result: Decimal) -> FilingAction:
    if result > 0:
        return FilingAction.TO_PAY
    if result < 0:
        return FilingAction.TO_OFFSET
    return FilingAction.NO_ACTIVITY


class BoxSet(BaseModel):
    """Named numeric fields of one declaration, in form order.

    Subclasses list their box fields in ``BOX_FIELDS``; ``boxes()`` returns them
    in that order for rendering.
    """

    FORM: ClassVar[str] = ""
    BOX_FIELDS: ClassVar[tuple[str, ...]] = ()

    year: int
    quarter: int | None = None

    model_config = ConfigDict(frozen=True)

    def boxes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.BOX_FIELDS}

    @property
    def model(self) -> str:
        return self.FORM


class QuarterlyBoxSet(BoxSet):
    quarter: int
    result: Decimal
    action: FilingAction


class QuarterLine(BaseModel):
    quarter: int
    base: Decimal
    quota: Decimal
    result: Decimal

    model_config = ConfigDict(frozen=True)


class AnnualBoxSet(BoxSet):
    """Annual summary recomputed from the quarterly returns of one year."""

    annual_total: Decimal
    quarterly_total: Decimal
    difference: Decimal
    reconciled: bool
    quarters: tuple[QuarterLine, ...]


def check_quarterly_period(quarter: int, year: int) -> None:
    check_quarter(quarter)
    check_year(year)


B = TypeVar("B", bound=QuarterlyBoxSet)


def check_annual_inputs(box_sets: Sequence[B], form: str) -> tuple[int, list[B]]:
    """Ensure a set of quarterly returns belongs to one year with no repeated quarter."""
    if not box_sets:
        raise InvalidPeriod(f"At least one quarterly {form} return is required", field="quarters")
    years = {b.year for b in box_sets}
    if len(years) != 1:
        raise InvalidPeriod(f"Quarterly {form} returns span several years: {sorted(years)}", field="year")
    quarters = [b.quarter for b in box_sets]
    if len(set(quarters)) != len(quarters):
        raise InvalidPeriod(f"Duplicate quarter in {form} returns: {sorted(quarters)}", field="quarters")
    for b in box_sets:
        if b.FORM != form:
            raise InvalidPeriod(f"Expected {form} returns, got {b.FORM}", field="quarters")
    year = years.pop()
    check_year(year)
    return year, sorted(box_sets, key=lambda b: b.quarter)


def reconciles(annual: Decimal, quarterly: Decimal) -> tuple[Decimal, bool]:
    difference = round2(abs(annual - quarterly))
    return difference, difference <= RECONCILIATION_TOLERANCE


__all__ = [
    "RECONCILIATION_TOLERANCE",
    "FilingAction",
    "action_for",
    "BoxSet",
    "QuarterlyBoxSet",
    "QuarterLine",
    "AnnualBoxSet",
    "check_quarterly_period",
    "check_annual_inputs",
    "reconciles",
]
