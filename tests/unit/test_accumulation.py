from decimal import Decimal as D

import hypothesis.strategies as st
import pytest
from hypothesis import given

from fiscal.core.accumulation import (
    QuarterFigures,
    accumulate,
    accumulate_year,
    accumulated_income,
    net_result,
    prior_positive_payments,
    quarters_from_vectors,
    tentative_quota,
)
from fiscal.core.errors import InvalidAmount, InvalidPeriod
from tests.fixtures.quarters import salaried_year, swinging_year


def test_swinging_year_positions():
    positions = accumulate_year(swinging_year())
    assert [p.net_result for p in positions] == [D("1000.00"), D("-500.00"), D("2000.00"), D("800.00")]
    assert [p.tentative_quota for p in positions] == [D("200.00"), D("0.00"), D("400.00"), D("160.00")]
    assert [p.prior_positive_payments for p in positions] == [D("0.00"), D("200.00"), D("200.00"), D("400.00")]
    assert [p.result for p in positions] == [D("200.00"), D("-200.00"), D("200.00"), D("-240.00")]


def test_withholding_reduces_result_and_prior_payments():
    positions = accumulate_year(salaried_year())
    assert [p.accumulated_withholding for p in positions] == [
        D("150.00"),
        D("300.00"),
        D("450.00"),
        D("600.00"),
    ]
    assert [p.prior_positive_payments for p in positions] == [D("0.00"), D("50.00"), D("100.00"), D("150.00")]
    assert all(p.result == D("50.00") for p in positions)


def test_loss_gives_zero_tentative_quota():
    quarters = quarters_from_vectors(["100"], ["400"])
    assert net_result(quarters, 1) == D("-300.00")
    assert tentative_quota(quarters, 1) == D("0.00")
    assert accumulate(quarters, 1).result == D("0.00")


def test_accumulated_sums_only_up_to_quarter():
    quarters = swinging_year()
    assert accumulated_income(quarters, 1) == D("1000.00")
    assert accumulated_income(quarters, 3) == D("3500.00")


def test_custom_rate():
    quarters = quarters_from_vectors(["1000"], ["0"])
    assert accumulate(quarters, 1, rate=D("0.07")).tentative_quota == D("70.00")


def test_missing_quarters_rejected():
    with pytest.raises(InvalidPeriod):
        accumulate(swinging_year()[:2], 3)


@pytest.mark.parametrize("quarter", [0, 5, True])
def test_invalid_quarter(quarter):
    with pytest.raises(InvalidPeriod):
        accumulate(swinging_year(), quarter)


def test_vector_lengths_must_match():
    with pytest.raises(InvalidPeriod):
        quarters_from_vectors(["1"], ["1", "2"])


def test_year_needs_one_to_four_quarters():
    with pytest.raises(InvalidPeriod):
        accumulate_year(())
    with pytest.raises(InvalidPeriod):
        accumulate_year(swinging_year() + swinging_year()[:1])


def test_quarter_figures_reject_bad_amounts():
    with pytest.raises(InvalidAmount):
        QuarterFigures.of(income="1.001")


def test_recomputation_is_idempotent():
    quarters = swinging_year()
    assert accumulate(quarters, 4) == accumulate(quarters, 4)
    assert accumulate_year(quarters) == accumulate_year(tuple(quarters))


_cents = st.integers(min_value=-10**8, max_value=10**8).map(lambda c: D(c) / 100)
_quarter = st.builds(
    QuarterFigures.of,
    income=_cents,
    deductible_expense=_cents,
    withholding=st.integers(min_value=0, max_value=10**7).map(lambda c: D(c) / 100),
)


@given(st.lists(_quarter, min_size=1, max_size=4))
def test_prior_payments_properties(quarters):
    assert prior_positive_payments(quarters, 1) == D("0.00")
    previous = D("0.00")
    for quarter in range(1, len(quarters) + 1):
        paid = prior_positive_payments(quarters, quarter)
        assert paid >= previous
        previous = paid
        position = accumulate(quarters, quarter)
        assert position.result == position.tentative_quota - paid - position.accumulated_withholding


def test_direct_construction_normalises_amounts():
    figures = QuarterFigures(income=1.5, deductible_expense="200", withholding=D("15"))
    assert figures == QuarterFigures(income=D("1.50"), deductible_expense=D("200.00"), withholding=D("15.00"))
    assert accumulate([figures], 1).net_result == D("-198.50")
    with pytest.raises(InvalidAmount) as exc:
        QuarterFigures(withholding="0.001")
    assert exc.value.field == "withholding"
