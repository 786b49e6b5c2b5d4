from decimal import Decimal as D

import pytest

from fiscal.core.errors import InvalidAmount
from fiscal.core.risk import (
    RiskTier,
    dependency_alert,
    dependency_percentage,
    is_economically_dependent,
    score_dependency_risk,
    tier_for,
)


def test_low_risk():
    score = score_dependency_risk(10, True)
    assert score.score == 0
    assert score.tier is RiskTier.LOW
    assert score.factors == ()


def test_dependency_threshold_is_inclusive():
    score = score_dependency_risk(75, True)
    assert score.score == 40
    assert score.tier is RiskTier.MEDIUM
    assert [f.name for f in score.factors] == ["dependency_over_75"]


def test_dependency_without_independence_expenses():
    score = score_dependency_risk("80", False)
    assert score.score == 70
    assert score.tier is RiskTier.HIGH


def test_every_factor():
    score = score_dependency_risk(D("90"), False, high_risk_expense_count=2)
    assert [(f.name, f.points) for f in score.factors] == [
        ("dependency_over_75", 40),
        ("dependency_over_85", 20),
        ("missing_independence_expenses", 30),
        ("high_risk_expenses", 10),
    ]
    assert score.score == 100
    assert score.tier is RiskTier.CRITICAL


@pytest.mark.parametrize("score, tier", [(0, "LOW"), (24, "LOW"), (25, "MEDIUM"), (49, "MEDIUM"), (50, "HIGH"), (74, "HIGH"), (75, "CRITICAL")])
def test_tier_boundaries(score, tier):
    assert tier_for(score) is RiskTier(tier)


@pytest.mark.parametrize("pct", [-1, "101", None, "abc"])
def test_percentage_out_of_range(pct):
    with pytest.raises(InvalidAmount):
        score_dependency_risk(pct, True)


@pytest.mark.parametrize("count", [-1, True, 1.5])
def test_bad_high_risk_count(count):
    with pytest.raises(InvalidAmount):
        score_dependency_risk(50, True, count)


def test_dependency_percentage():
    assert dependency_percentage(7500, 10000) == D("75.00")
    assert dependency_percentage(1, 3) == D("33.33")
    assert dependency_percentage(0, 0) == D("0.00")
    assert is_economically_dependent("75")
    assert not is_economically_dependent("74.99")


def test_dependency_alerts():
    alert = dependency_alert("EXCESSIVE_DEPENDENCY", percentage="82.5")
    assert "82.5%" in alert["description"]
    missing = dependency_alert("MISSING_INDEPENDENCE_EXPENSE", expense_type="electricity", month=3, year=2026)
    assert "3/2026" in missing["description"]
    assert set(dependency_alert("UNKNOWN")) == {"title", "description", "recommendation"}
