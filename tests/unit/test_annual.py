from decimal import Decimal as D

import pytest

from fiscal.core.errors import InvalidPeriod
from fiscal.declarations import (
    VatBreakdown,
    build_annual_rental_summary,
    build_annual_vat_summary,
    build_rental_withholding_return,
    build_vat_return,
)
from fiscal.declarations.modelo115 import RentalPayment
from tests.fixtures.quarters import rental_returns, vat_returns


def test_annual_vat_summary_reconciles():
    summary = build_annual_vat_summary(vat_returns())
    assert summary.model == "390"
    assert summary.quarter is None
    assert summary.collected_base == D("4000.00")
    assert summary.collected_quota == D("840.00")
    assert summary.deductible_quota == D("168.00")
    assert summary.annual_total == D("672.00")
    assert summary.quarterly_total == D("672.00")
    assert summary.difference == D("0.00")
    assert summary.reconciled
    assert [line.quarter for line in summary.quarters] == [1, 2, 3, 4]
    assert summary.totals.collected.general.base == D("4000.00")


def test_annual_vat_summary_flags_offsets_as_mismatch():
    returns = vat_returns()
    returns[2] = build_vat_return(
        VatBreakdown.from_bases(general="1000"),
        VatBreakdown.from_bases(general="200"),
        3,
        2026,
        prior_offsets="100",
    )
    summary = build_annual_vat_summary(returns)
    assert summary.quarterly_total == D("572.00")
    assert summary.difference == D("100.00")
    assert not summary.reconciled


def test_annual_vat_summary_accepts_partial_year_in_any_order():
    returns = vat_returns()
    summary = build_annual_vat_summary([returns[3], returns[0]])
    assert [line.quarter for line in summary.quarters] == [1, 4]
    assert summary.reconciled


def test_annual_rental_summary_reconciles():
    summary = build_annual_rental_summary(rental_returns())
    assert summary.model == "180"
    assert summary.payee_count == 1
    assert summary.payees == ("12345678Z",)
    assert summary.total_base == D("4000.00")
    assert summary.annual_total == D("760.00")
    assert summary.quarterly_total == D("760.00")
    assert summary.reconciled
    assert summary.boxes() == {
        "payee_count": 1,
        "total_base": D("4000.00"),
        "annual_total": D("760.00"),
    }


def test_annual_rental_summary_counts_distinct_payees():
    returns = rental_returns()
    returns[1] = build_rental_withholding_return(
        [RentalPayment(payee_tax_id="B12345674", base=D("1000"))], 2, 2026
    )
    summary = build_annual_rental_summary(returns)
    assert summary.payee_count == 2
    assert summary.reconciled


def test_small_rounding_drift_is_tolerated():
    returns = rental_returns(base="0.05")
    summary = build_annual_rental_summary(returns)
    assert summary.quarterly_total == D("0.04")
    assert summary.annual_total == D("0.04")
    assert summary.reconciled


def test_annual_rental_summary_reports_correction_mismatch():
    returns = rental_returns()
    returns[0] = build_rental_withholding_return(
        [RentalPayment(payee_tax_id="12345678Z", base=D("1000"))], 1, 2026, correction="100"
    )
    summary = build_annual_rental_summary(returns)
    assert summary.difference == D("100.00")
    assert not summary.reconciled


def test_duplicate_quarters_rejected():
    returns = vat_returns()
    with pytest.raises(InvalidPeriod):
        build_annual_vat_summary([returns[0], returns[0]])


def test_mixed_years_rejected():
    returns = vat_returns(2025)[:2] + vat_returns(2026)[2:]
    with pytest.raises(InvalidPeriod):
        build_annual_vat_summary(returns)


def test_empty_year_rejected():
    with pytest.raises(InvalidPeriod):
        build_annual_rental_summary([])


def test_wrong_model_rejected():
    with pytest.raises(InvalidPeriod):
        build_annual_rental_summary(vat_returns())
