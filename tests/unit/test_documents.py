from datetime import date
from decimal import Decimal as D

import pytest

from fiscal.core.documents import ExtractedDocument, completeness_score, missing_fields, next_document_number
from fiscal.core.errors import InvalidPeriod


def test_next_document_number():
    assert next_document_number(2026, 0) == "2026-001"
    assert next_document_number(2026, 41) == "2026-042"
    assert next_document_number(2026, 999) == "2026-1000"


@pytest.mark.parametrize("last", [-1, "3", True])
def test_next_document_number_rejects_bad_counter(last):
    with pytest.raises(InvalidPeriod):
        next_document_number(2026, last)


def test_next_document_number_rejects_unsupported_year():
    with pytest.raises(InvalidPeriod):
        next_document_number(1999, 0)


def test_complete_document():
    doc = ExtractedDocument(
        issuer_name="Papelería Sol SL",
        issuer_tax_id="B12345674",
        document_number="2026-014",
        issue_date=date(2026, 3, 2),
        base=D("100.00"),
        vat_quota=D("21.00"),
        total=D("121.00"),
    )
    assert missing_fields(doc) == []
    assert completeness_score(doc) == 1.0


def test_partial_document():
    doc = ExtractedDocument(issuer_name="  ", issuer_tax_id="B12345674", base=D("10"), total=D("12.10"), vat_rate=D("21"))
    assert missing_fields(doc) == ["issuer_name", "document_number", "issue_date", "vat_quota"]
    assert completeness_score(doc) == 0.43
    assert completeness_score(ExtractedDocument()) == 0.0
