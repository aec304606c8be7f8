"""Budget performance engine - utilization, pacing, health score and violations"""

from dataclasses import replace
from datetime import date
from typing import List, Tuple

from finance_analytics.domain.models import (
    Budget,
    BudgetProjection,
    CategoryUtilization,
    HealthFactor,
    HealthScore,
    PerformanceReport,
    Recommendation,
    Violation,
)
from finance_analytics.domain.validation import validate_budget
from finance_analytics.utils.date_utils import days_between

ON_TRACK_TOLERANCE = 10.0  # max |burn rate - time progress| still considered on track
POOR_PACING_THRESHOLD = 20.0
CATEGORY_IMBALANCE_THRESHOLD = 25.0


def _timeline(budget: Budget, as_of: date) -> Tuple[int, int, float]:
    """(total_days, elapsed_days, time_progress %), elapsed clamped to the budget period"""
    total_days = days_between(budget.start_date, budget.end_date)
    elapsed_days = min(max(0, days_between(budget.start_date, as_of)), total_days)
    time_progress = min(100.0, max(0.0, elapsed_days / total_days * 100))
    return total_days, elapsed_days, time_progress


def utilization(spent: float, allocated: float) -> float:
    """spent/allocated as a percentage; 0 when nothing is allocated"""
    return (spent / allocated) * 100 if allocated > 0 else 0.0


def _category_status(spent: float, allocated: float, alert_threshold: float) -> str:
    utilization_pct = utilization(spent, allocated)
    if spent > allocated:
        return "over-budget"
    if utilization_pct >= alert_threshold:
        return "warning"
    return "on-track"


def category_utilization(budget: Budget) -> Tuple[CategoryUtilization, ...]:
    return tuple(
        CategoryUtilization(
            category_id=a.category_id,
            category_name=a.category_name,
            allocated_amount=a.allocated_amount,
            spent_amount=a.spent_amount,
            utilization_percentage=utilization(a.spent_amount, a.allocated_amount),
            status=_category_status(a.spent_amount, a.allocated_amount, budget.alert_threshold),
        )
        for a in budget.category_allocations
    )


def health_level(score: float) -> str:
    if score >= 90:
        return "Excellent"
    elif score >= 75:
        return "Good"
    elif score >= 60:
        return "Fair"
    elif score >= 40:
        return "Poor"
    else:
        return "Critical"


def health_score(budget: Budget, as_of: date) -> HealthScore:
    """
    Score a budget from 0 (critical) to 100 (excellent).

    Starts at 100; each factor below subtracts a capped penalty and is
    listed in `factors` so the score can be explained:
    - Over Budget: min(30, 2 * (utilization - 100)) when utilization > 100
    - Under-Utilized: 10 when utilization < 50 and time progress > 75
    - Poor Pacing: min(20, |burn variance| / 2) when |burn variance| > 20
    - Category Imbalance: min(15, avg / 5) when the mean |category
      utilization - 100| exceeds 25
    """
    validate_budget(budget)

    _, _, time_progress = _timeline(budget, as_of)
    total_utilization = utilization(budget.total_spent, budget.total_amount)
    burn_rate_variance = total_utilization - time_progress

    score = 100.0
    factors: List[HealthFactor] = []

    if total_utilization > 100:
        penalty = min(30.0, (total_utilization - 100) * 2)
        score -= penalty
        factors.append(
            HealthFactor("Over Budget", -penalty, f"{total_utilization - 100:.1f}% over budget")
        )
    elif total_utilization < 50 and time_progress > 75:
        penalty = 10.0
        score -= penalty
        factors.append(HealthFactor("Under-Utilized", -penalty, "Significant unused budget allocation"))

    if abs(burn_rate_variance) > POOR_PACING_THRESHOLD:
        penalty = min(20.0, abs(burn_rate_variance) / 2)
        score -= penalty
        pace = "too fast" if burn_rate_variance > 0 else "too slow"
        factors.append(HealthFactor("Poor Pacing", -penalty, f"Spending {pace}"))

    if budget.category_allocations:
        variances = [
            abs(utilization(a.spent_amount, a.allocated_amount) - 100) for a in budget.category_allocations
        ]
        avg_category_variance = sum(variances) / len(variances)
        if avg_category_variance > CATEGORY_IMBALANCE_THRESHOLD:
            penalty = min(15.0, avg_category_variance / 5)
            score -= penalty
            factors.append(HealthFactor("Category Imbalance", -penalty, "Uneven spending across categories"))

    score = round(min(100.0, max(0.0, score)), 2)
    return HealthScore(score=score, health_level=health_level(score), factors=tuple(factors))


def check_violations(budget: Budget) -> Tuple[Violation, ...]:
    """
    Overspending and warning conditions for the budget and each category.

    Exceeding 100% is reported here, never raised.
    """
    validate_budget(budget)

    violations: List[Violation] = []
    total_utilization = utilization(budget.total_spent, budget.total_amount)

    if budget.total_spent > budget.total_amount:
        overage = budget.total_spent - budget.total_amount
        violations.append(
            Violation(
                type="budget_exceeded",
                level="critical",
                message=f"Budget exceeded by ${overage:.2f}",
                percentage=overage / budget.total_amount * 100,
                amount=overage,
            )
        )
    elif total_utilization >= budget.alert_threshold:
        violations.append(
            Violation(
                type="budget_warning",
                level="warning",
                message=f"{total_utilization:.1f}% of budget used",
                percentage=total_utilization,
            )
        )

    for allocation in budget.category_allocations:
        category_pct = utilization(allocation.spent_amount, allocation.allocated_amount)
        label = allocation.category_name or allocation.category_id
        if allocation.spent_amount > allocation.allocated_amount:
            overage = allocation.spent_amount - allocation.allocated_amount
            violations.append(
                Violation(
                    type="category_exceeded",
                    level="critical",
                    message=f"{label} exceeded by ${overage:.2f}",
                    # Spending against a zero allocation is reported as fully over
                    percentage=overage / allocation.allocated_amount * 100 if allocation.allocated_amount > 0 else 100.0,
                    amount=overage,
                    category_id=allocation.category_id,
                )
            )
        elif category_pct >= budget.alert_threshold:
            violations.append(
                Violation(
                    type="category_warning",
                    level="warning",
                    message=f"{category_pct:.1f}% of {label} budget used",
                    percentage=category_pct,
                    category_id=allocation.category_id,
                )
            )

    return tuple(violations)


def project_budget(budget: Budget, as_of: date) -> BudgetProjection:
    """
    Extrapolate spending to the end of the period at the current daily rate.

    Budgets that have not started or have already ended cannot be projected;
    the reason is returned instead.
    """
    validate_budget(budget)

    if as_of < budget.start_date:
        return BudgetProjection(can_project=False, reason="Budget has not started yet")
    if as_of > budget.end_date:
        return BudgetProjection(can_project=False, reason="Budget has already ended")

    total_days = days_between(budget.start_date, budget.end_date)
    days_elapsed = days_between(budget.start_date, as_of)
    days_remaining = days_between(as_of, budget.end_date)

    spent = budget.total_spent
    daily_rate = spent / days_elapsed if days_elapsed > 0 else 0.0
    projected_total = spent + daily_rate * days_remaining
    projected_utilization = projected_total / budget.total_amount * 100

    if projected_utilization > 100:
        status = "over-budget"
    elif projected_utilization > 90:
        status = "warning"
    else:
        status = "on-track"

    return BudgetProjection(
        can_project=True,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        total_days=total_days,
        spent_to_date=spent,
        daily_spending_rate=daily_rate,
        projected_total_spending=projected_total,
        projected_variance=budget.total_amount - projected_total,
        projected_utilization=projected_utilization,
        status=status,
    )


def recommend(budget: Budget, report: PerformanceReport) -> Tuple[Recommendation, ...]:
    """Optimization suggestions derived from a performance report"""
    recommendations: List[Recommendation] = []

    if report.burn_rate > 100:
        recommendations.append(
            Recommendation(
                type="warning",
                category="overspending",
                priority="high",
                title="Budget Exceeded",
                description=f'Budget "{budget.name}" is {report.burn_rate - 100:.1f}% over budget',
            )
        )

    if report.burn_rate_variance > POOR_PACING_THRESHOLD:
        recommendations.append(
            Recommendation(
                type="warning",
                category="burn_rate",
                priority="medium",
                title="High Spending Rate",
                description=f"Spending rate is {report.burn_rate_variance:.1f}% above ideal",
            )
        )

    for allocation in budget.category_allocations:
        if allocation.spent_amount > allocation.allocated_amount:
            label = allocation.category_name or allocation.category_id
            recommendations.append(
                Recommendation(
                    type="action",
                    category="category_overspend",
                    priority="medium",
                    title=f"{label} Category Over Budget",
                    description=f"{label} is ${allocation.spent_amount - allocation.allocated_amount:.2f} over budget",
                    category_id=allocation.category_id,
                )
            )

    if report.burn_rate < 50 and report.time_progress > 75:
        recommendations.append(
            Recommendation(
                type="opportunity",
                category="underutilization",
                priority="low",
                title="Budget Under-Utilized",
                description=f'Only {report.burn_rate:.1f}% of "{budget.name}" used with {100 - report.time_progress:.1f}% of the period left',
            )
        )

    return tuple(recommendations)


def evaluate(budget: Budget, as_of: date, include_recommendations: bool = True) -> PerformanceReport:
    """
    Main entry point: full performance report for a budget as of a date.

    Raises:
        InvalidInputError: if the budget breaks its invariants
    """
    validate_budget(budget)

    total_days, elapsed_days, time_progress = _timeline(budget, as_of)
    total_spent = budget.total_spent

    burn_rate = total_spent / budget.total_amount * 100
    burn_rate_variance = burn_rate - time_progress

    daily_spending_rate = total_spent / max(1, elapsed_days)
    projected_end_spending = daily_spending_rate * total_days

    report = PerformanceReport(
        budget_id=budget.budget_id,
        as_of=as_of,
        total_amount=budget.total_amount,
        total_spent=total_spent,
        total_remaining=budget.total_amount - total_spent,
        total_days=total_days,
        days_elapsed=elapsed_days,
        days_remaining=total_days - elapsed_days,
        time_progress=time_progress,
        burn_rate=burn_rate,
        burn_rate_variance=burn_rate_variance,
        is_on_track=abs(burn_rate_variance) <= ON_TRACK_TOLERANCE,
        daily_spending_rate=daily_spending_rate,
        projected_end_spending=projected_end_spending,
        projected_overrun=max(0.0, projected_end_spending - budget.total_amount),
        category_utilization=category_utilization(budget),
        health=health_score(budget, as_of),
        violations=check_violations(budget),
        projection=project_budget(budget, as_of),
    )

    if not include_recommendations:
        return report

    return replace(report, recommendations=recommend(budget, report))
