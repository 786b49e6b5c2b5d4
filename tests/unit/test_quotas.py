from decimal import Decimal as D

import hypothesis.strategies as st
import pytest
from hypothesis import given

from fiscal.core.errors import InvalidAmount, UnsupportedRate
from fiscal.core.money import round2
from fiscal.core.quotas import (
    VAT_RATES,
    WITHHOLDING_RATES,
    check_vat_rate,
    document_total,
    expense_total,
    quote_invoice,
    rental_withholding,
    validate_document_total,
    validate_vat_quota,
    validate_withholding_quota,
    vat_quota,
    withholding_quota,
)


def test_professional_invoice():
    assert vat_quota(1000, 21) == D("210.00")
    assert withholding_quota(1000, 15) == D("150.00")
    assert document_total(1000, D("210.00"), 0) == D("1210.00")
    assert document_total(1000, D("210.00"), D("150.00")) == D("1060.00")


def test_quote_invoice():
    quote = quote_invoice("1000", 21, 15)
    assert quote == {
        "base": D("1000.00"),
        "vat_quota": D("210.00"),
        "withholding_quota": D("150.00"),
        "total": D("1060.00"),
    }
    assert quote_invoice("100", 10)["total"] == D("110.00")


def test_quota_rounds_half_up():
    assert vat_quota("0.05", 10) == D("0.01")
    assert vat_quota("33.33", 4) == D("1.33")
    assert withholding_quota("0.50", 7) == D("0.04")


def test_new_professional_and_rental_rates():
    assert withholding_quota(2000, 7) == D("140.00")
    assert withholding_quota(2000, 0) == D("0.00")
    assert rental_withholding(800) == D("152.00")


def test_expense_total_matches_document_total():
    assert expense_total(500, 105, 95) == D("510.00")


def test_zero_base():
    assert vat_quota(0, 21) == D("0.00")
    assert document_total(0, 0) == D("0.00")


@pytest.mark.parametrize("rate", [16, "8", D("21.5"), None, "x"])
def test_unsupported_vat_rate(rate):
    with pytest.raises(UnsupportedRate) as exc:
        vat_quota(100, rate)
    assert exc.value.field == "vat_rate"


def test_unsupported_withholding_rate():
    with pytest.raises(UnsupportedRate) as exc:
        withholding_quota(100, 21)
    assert exc.value.code == "unsupported_rate"


def test_rate_equality_is_numeric():
    assert check_vat_rate("21.00") == D("21")
    assert vat_quota(100, D("21.0")) == D("21.00")


@pytest.mark.parametrize("base", ["-1", "10.001", D("NaN")])
def test_invalid_base(base):
    with pytest.raises(InvalidAmount):
        vat_quota(base, 21)


def test_quota_validators_use_one_cent_tolerance():
    assert validate_vat_quota(1000, 21, "210.01")
    assert validate_vat_quota(1000, 21, "209.99")
    assert not validate_vat_quota(1000, 21, "210.02")
    assert validate_withholding_quota(1000, 15, "150")
    assert not validate_withholding_quota(1000, 15, "151")


def test_validators_reject_non_finite_declared_values():
    assert not validate_vat_quota(1000, 21, "NaN")
    assert not validate_vat_quota(1000, 21, None)
    assert not validate_document_total(1000, 210, 150, "abc")


def test_document_total_validator():
    assert validate_document_total(1000, 210, 150, "1060.01")
    assert not validate_document_total(1000, 210, 150, "1060.05")


@given(
    st.integers(min_value=0, max_value=10**11),
    st.sampled_from(sorted(VAT_RATES | WITHHOLDING_RATES)),
)
def test_quota_is_the_rounded_exact_product(cents: int, rate: D):
    base = D(cents) / 100
    exact = base * rate / 100
    quota = vat_quota(base, rate) if rate in VAT_RATES else withholding_quota(base, rate)
    assert quota == round2(exact)
    assert abs(quota - exact) <= D("0.005")
    assert quota.as_tuple().exponent == -2


def test_oversized_base_is_invalid_amount():
    with pytest.raises(InvalidAmount):
        vat_quota("1e30", 21)
    with pytest.raises(InvalidAmount):
        document_total("1e30", 0)
