from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from .errors import InvalidPeriod
from .periods import check_year

NUMBER_WIDTH = 3


def next_document_number(year: int, last_number: int) -> str:
    """Next sequential number within ``year``, formatted ``YYYY-NNN``.

    Allocation must happen inside the persistence layer's per-owner, per-year
    critical section; this only formats the successor.
    """
    check_year(year)
    if isinstance(last_number, bool) or not isinstance(last_number, int) or last_number < 0:
        raise InvalidPeriod(f"last_number must be a non-negative integer, got {last_number!r}", field="last_number")
    return f"{year}-{last_number + 1:0{NUMBER_WIDTH}d}"


class ExtractedDocument(BaseModel):
    """Fields read from an uploaded invoice or receipt; any of them may be missing."""

    issuer_name: str | None = None
    issuer_tax_id: str | None = None
    document_number: str | None = None
    issue_date: date | None = None
    base: Decimal | None = None
    vat_rate: Decimal | None = None
    vat_quota: Decimal | None = None
    withholding_quota: Decimal | None = None
    total: Decimal | None = None

    model_config = ConfigDict(frozen=True)


REQUIRED_FIELDS: tuple[str, ...] = (
    "issuer_name",
    "issuer_tax_id",
    "document_number",
    "issue_date",
    "base",
    "vat_quota",
    "total",
)


def missing_fields(doc: ExtractedDocument) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(doc, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def completeness_score(doc: ExtractedDocument) -> float:
    present = len(REQUIRED_FIELDS) - len(missing_fields(doc))
    return round(present / len(REQUIRED_FIELDS), 2)


__all__ = [
    "next_document_number",
    "ExtractedDocument",
    "REQUIRED_FIELDS",
    "missing_fields",
    "completeness_score",
]
