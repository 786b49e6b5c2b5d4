from decimal import Decimal as D

import hypothesis.strategies as st
import pytest
from hypothesis import given

from fiscal.core.errors import InvalidAmount
from fiscal.core.social_security import (
    DEFAULT_CONTRIBUTION_BASE,
    ContributionPath,
    bracket_for,
    contribution_brackets,
    quota_for_base,
    quote_social_security,
    social_security_quota,
    suggested_base_range,
)


def test_flat_rate_quota():
    quote = quote_social_security(1500, flat_rate=True)
    assert quote.path is ContributionPath.FLAT_RATE
    assert quote.base == DEFAULT_CONTRIBUTION_BASE
    assert quote.main_quota == D("80.00")
    assert quote.supplementary_quota == D("8.56")
    assert quote.total == D("88.56")


def test_standard_quota_uses_default_base():
    assert social_security_quota(1500) == D("299.56")


def test_standard_quota_uses_chosen_base():
    assert social_security_quota(1500, chosen_base="1000") == D("315.00")
    assert social_security_quota(1500, chosen_base=0) == D("299.56")


def test_flat_rate_supplement_follows_chosen_base():
    assert social_security_quota(1500, flat_rate=True, chosen_base="2000") == D("98.00")


def test_quote_reports_bracket_without_using_it():
    quote = quote_social_security(5000)
    assert quote.bracket.tier == 14
    assert quote.base == DEFAULT_CONTRIBUTION_BASE
    assert quote.total == D("299.56")


def test_negative_chosen_base_rejected():
    with pytest.raises(InvalidAmount):
        quote_social_security(1500, chosen_base="-1")


def test_quota_for_base():
    assert quota_for_base("1161.90") == D("366.00")


@pytest.mark.parametrize(
    "income, tier",
    [
        ("-250", 1),
        ("0", 1),
        ("670.00", 1),
        ("670.004", 1),
        ("670.005", 2),
        ("670.01", 2),
        ("1700.00", 6),
        ("1700.01", 7),
        ("6000.00", 14),
        ("6000.01", 15),
        ("250000", 15),
    ],
)
def test_bracket_boundaries(income, tier):
    assert bracket_for(income).tier == tier


def test_suggested_base_range():
    assert suggested_base_range("800") == (D("718.95"), D("900.00"))


def test_table_is_contiguous():
    table = contribution_brackets()
    assert len(table) == 15
    assert [b.tier for b in table] == list(range(1, 16))
    for previous, current in zip(table, table[1:]):
        assert current.income_from == previous.income_to + D("0.01")
    assert table[-1].income_to is None


def test_every_cent_grid_income_in_exactly_one_bracket():
    table = contribution_brackets()
    for step in range(10000):
        income = D(step * 499) / 100
        covering = [b for b in table if b.covers(income)]
        assert len(covering) == 1, income


@given(st.decimals(min_value=-1000, max_value=100000, allow_nan=False, allow_infinity=False, places=4))
def test_bracket_for_always_resolves(income: D):
    bracket = bracket_for(income)
    assert bracket.min_base <= bracket.max_base


def test_oversized_income_is_invalid_amount():
    with pytest.raises(InvalidAmount):
        bracket_for("1e30")
