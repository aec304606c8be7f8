"""Unit tests for budget performance logic"""

import pytest
from dataclasses import replace
from datetime import date
from finance_analytics.domain.budgets import (
    category_utilization,
    check_violations,
    evaluate,
    health_level,
    health_score,
    project_budget,
)
from finance_analytics.domain.exceptions import InvalidInputError
from finance_analytics.domain.models import Budget, CategoryAllocation

DAY_20 = date(2024, 6, 21)


def test_evaluate_burn_rate_and_pacing(sample_budget: Budget):
    """Test 900 of 1000 spent 20 days into a 30 day budget"""
    report = evaluate(sample_budget, DAY_20)

    assert report.total_days == 30
    assert report.days_elapsed == 20
    assert report.days_remaining == 10
    assert report.time_progress == pytest.approx(66.67, abs=0.01)
    assert report.burn_rate == pytest.approx(90.0)
    assert report.burn_rate_variance == pytest.approx(23.33, abs=0.01)
    assert report.is_on_track is False
    assert report.total_remaining == pytest.approx(100.0)
    assert report.daily_spending_rate == pytest.approx(45.0)
    assert report.projected_end_spending == pytest.approx(1350.0)
    assert report.projected_overrun == pytest.approx(350.0)


def test_health_score_poor_pacing(sample_budget: Budget):
    """Test that poor pacing is the only penalty applied"""
    health = health_score(sample_budget, DAY_20)

    assert health.score == pytest.approx(88.33, abs=0.01)
    assert health.health_level == "Good"
    assert [f.factor for f in health.factors] == ["Poor Pacing"]
    assert health.factors[0].impact == pytest.approx(-11.67, abs=0.01)


def test_health_score_over_budget_penalty_capped(sample_budget: Budget):
    """Test over budget penalty is capped at 30"""
    overspent = replace(
        sample_budget,
        category_allocations=(
            CategoryAllocation("groceries", 600.0, 1000.0),
            CategoryAllocation("dining", 400.0, 500.0),
        ),
    )

    health = health_score(overspent, date(2024, 7, 1))
    factors = {f.factor: f.impact for f in health.factors}

    assert factors["Over Budget"] == -30.0
    assert 0 <= health.score < 100


def test_health_score_under_utilized(sample_budget: Budget):
    """Test late-period low spending is penalized"""
    idle = replace(
        sample_budget,
        category_allocations=(
            CategoryAllocation("groceries", 600.0, 100.0),
            CategoryAllocation("dining", 400.0, 100.0),
        ),
    )

    health = health_score(idle, date(2024, 6, 28))

    assert "Under-Utilized" in [f.factor for f in health.factors]


def test_health_score_bounds(sample_budget: Budget):
    """Test the score stays within [0, 100] for extreme spending"""
    extreme = replace(
        sample_budget,
        category_allocations=(CategoryAllocation("groceries", 600.0, 100000.0),),
    )

    health = health_score(extreme, date(2024, 6, 2))

    assert 0 <= health.score <= 100
    assert health.health_level in ("Poor", "Critical")


def test_health_level_thresholds():
    assert health_level(90) == "Excellent"
    assert health_level(75) == "Good"
    assert health_level(60) == "Fair"
    assert health_level(40) == "Poor"
    assert health_level(39.99) == "Critical"


def test_check_violations_warning_level(sample_budget: Budget):
    """Test 90% utilization raises warnings but no critical violations"""
    violations = check_violations(sample_budget)

    assert [v.type for v in violations] == ["budget_warning", "category_warning", "category_warning"]
    assert all(v.level == "warning" for v in violations)


def test_check_violations_exceeded(sample_budget: Budget):
    """Test overspending is reported with the overage amount"""
    overspent = replace(
        sample_budget,
        category_allocations=(
            CategoryAllocation("groceries", 600.0, 700.0),
            CategoryAllocation("dining", 400.0, 350.0),
        ),
    )

    violations = check_violations(overspent)

    assert violations[0].type == "budget_exceeded"
    assert violations[0].amount == pytest.approx(50.0)
    assert violations[0].percentage == pytest.approx(5.0)
    exceeded = [v for v in violations if v.type == "category_exceeded"]
    assert len(exceeded) == 1
    assert exceeded[0].category_id == "groceries"
    assert exceeded[0].amount == pytest.approx(100.0)


def test_category_utilization_zero_allocation(sample_budget: Budget):
    """Test a zero allocation reports 0% utilization instead of dividing by zero"""
    budget = replace(
        sample_budget,
        category_allocations=(CategoryAllocation("gifts", 0.0, 0.0),),
    )

    utilization = category_utilization(budget)

    assert utilization[0].utilization_percentage == 0.0
    assert utilization[0].status == "on-track"


def test_project_budget_mid_period(sample_budget: Budget):
    projection = project_budget(sample_budget, DAY_20)

    assert projection.can_project is True
    assert projection.daily_spending_rate == pytest.approx(45.0)
    assert projection.projected_total_spending == pytest.approx(1350.0)
    assert projection.projected_variance == pytest.approx(-350.0)
    assert projection.status == "over-budget"


def test_project_budget_outside_period(sample_budget: Budget):
    """Test budgets not yet started or already ended cannot be projected"""
    before = project_budget(sample_budget, date(2024, 5, 31))
    after = project_budget(sample_budget, date(2024, 7, 2))

    assert before.can_project is False
    assert before.reason == "Budget has not started yet"
    assert after.can_project is False
    assert after.reason == "Budget has already ended"


def test_evaluate_clamps_timeline_after_end(sample_budget: Budget):
    """Test time progress never exceeds 100 after the budget ends"""
    report = evaluate(sample_budget, date(2024, 9, 1))

    assert report.time_progress == 100.0
    assert report.days_remaining == 0


def test_evaluate_recommendations(sample_budget: Budget):
    """Test a fast spending rate produces a burn rate recommendation"""
    report = evaluate(sample_budget, DAY_20)

    assert [r.category for r in report.recommendations] == ["burn_rate"]
    assert evaluate(sample_budget, DAY_20, include_recommendations=False).recommendations == ()


def test_evaluate_rejects_invalid_budget(sample_budget: Budget):
    """Test that a non-positive total is rejected"""
    with pytest.raises(InvalidInputError):
        evaluate(replace(sample_budget, total_amount=0.0), DAY_20)


@pytest.mark.parametrize("operation", [health_score, project_budget, lambda budget, _: check_violations(budget)])
def test_zero_length_budget_rejected(sample_budget: Budget, operation):
    """Test a budget starting and ending on the same day is rejected by each operation"""
    zero_length = replace(sample_budget, start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))

    with pytest.raises(InvalidInputError):
        operation(zero_length, date(2024, 1, 1))


def test_check_violations_rejects_zero_total(sample_budget: Budget):
    with pytest.raises(InvalidInputError):
        check_violations(replace(sample_budget, total_amount=0.0, category_allocations=()))
