"""Goal progress engine - progress metrics, achievement probability and milestones"""

import math
from datetime import date, timedelta
from typing import List, Optional, Tuple

from finance_analytics.domain.aggregation import bucket
from finance_analytics.domain.models import (
    BucketSeries,
    CompletionForecast,
    Goal,
    GoalStatus,
    Granularity,
    Milestone,
    ProgressMetrics,
)
from finance_analytics.domain.validation import validate_goal
from finance_analytics.utils.date_utils import days_between

DEFAULT_MILESTONES = (25.0, 50.0, 75.0, 100.0)
PROGRESS_CAP = 200.0  # overachievement stays visible without growing unbounded
DAYS_PER_MONTH = 30
MIN_MONTHS_REMAINING = 0.1
MIN_MONTHS_ACTIVE = 0.1
DEFICIT_WEIGHT = 2.0  # probability points lost per point behind schedule
COMFORT_MARGIN_DAYS = 30


def metrics(goal: Goal, as_of: date) -> ProgressMetrics:
    """
    Progress of a goal as of a date.

    Requirements:
    - progress_percentage capped at 200
    - timeline_progress capped at 100 (100 for a zero-length timeline)
    - required monthly contribution uses a 0.1 month floor near the deadline
    - average monthly contribution is the balance over months active, with a
      0.1 month floor for goals started days ago

    Raises:
        InvalidInputError: if the goal breaks its invariants
    """
    validate_goal(goal)

    total_days = days_between(goal.start_date, goal.target_date)
    days_elapsed = max(0, days_between(goal.start_date, as_of))
    days_remaining = max(0, days_between(as_of, goal.target_date))

    amount_remaining = max(0.0, goal.target_amount - goal.current_amount)
    progress_percentage = min(PROGRESS_CAP, goal.current_amount / goal.target_amount * 100)
    timeline_progress = min(100.0, days_elapsed / total_days * 100) if total_days > 0 else 100.0

    months_remaining = max(days_remaining / DAYS_PER_MONTH, MIN_MONTHS_REMAINING)
    required_monthly = amount_remaining / months_remaining if amount_remaining > 0 else 0.0

    # Balance over months active; goals without recorded contributions have no observed rate
    months_active = max(days_elapsed / DAYS_PER_MONTH, MIN_MONTHS_ACTIVE)
    average_monthly = goal.current_amount / months_active if goal.contributions else 0.0

    return ProgressMetrics(
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        amount_remaining=amount_remaining,
        progress_percentage=progress_percentage,
        timeline_progress=timeline_progress,
        months_remaining=months_remaining,
        required_monthly_contribution=required_monthly,
        average_monthly_contribution=average_monthly,
        is_achievable=days_remaining > 0,
        is_behind_schedule=progress_percentage < timeline_progress,
        schedule_status=_schedule_status(min(progress_percentage, 100.0), timeline_progress),
    )


def _schedule_status(amount_progress: float, time_progress: float) -> str:
    if amount_progress >= time_progress * 1.1:
        return "ahead"
    if amount_progress < time_progress * 0.9:
        return "behind"
    return "on-track"


def achievement_probability(goal: Goal, as_of: date, progress: Optional[ProgressMetrics] = None) -> float:
    """
    Likelihood (0-100) that the goal is reached by its target date.

    Rules, in order:
    1. Completed, or progress >= 100%  -> 100
    2. No days left and progress < 100% -> 0
    3. Start at 100, lose 2 points per point of schedule deficit, then scale
       by average/required monthly contribution when contributions lag.
    """
    if progress is None:
        progress = metrics(goal, as_of)

    if goal.status == GoalStatus.COMPLETED or progress.progress_percentage >= 100:
        return 100.0

    if progress.days_remaining <= 0:
        return 0.0

    probability = 100.0

    if progress.progress_percentage < progress.timeline_progress:
        deficit = progress.timeline_progress - progress.progress_percentage
        probability -= deficit * DEFICIT_WEIGHT

    required = progress.required_monthly_contribution
    if required > 0 and progress.average_monthly_contribution < required:
        probability *= progress.average_monthly_contribution / required

    return min(100.0, max(0.0, probability))


def milestones(goal: Goal) -> Tuple[Milestone, ...]:
    """
    Checkpoints at each configured percentage of the target.

    An achieved milestone is dated by the contribution whose running total
    (oldest first) first reaches the milestone amount; the date stays None
    when the balance got there without recorded contributions.
    """
    percentages = sorted(goal.milestone_percentages) if goal.milestone_percentages else DEFAULT_MILESTONES
    ordered = sorted(goal.contributions, key=lambda c: c.date)

    checkpoints: List[Milestone] = []
    for percentage in percentages:
        amount = percentage / 100 * goal.target_amount
        achieved = goal.current_amount >= amount

        achieved_date = None
        if achieved:
            running_total = 0.0
            for contribution in ordered:
                running_total += contribution.amount
                if running_total >= amount:
                    achieved_date = contribution.date
                    break

        checkpoints.append(
            Milestone(
                percentage=percentage,
                amount=round(amount, 2),
                achieved=achieved,
                achieved_date=achieved_date,
            )
        )

    return tuple(checkpoints)


def contribution_trends(goal: Goal) -> BucketSeries:
    """Monthly totals, counts and averages of contributions"""
    return bucket(goal.contributions, Granularity.MONTH)


def predict_completion(goal: Goal, as_of: date) -> CompletionForecast:
    """
    Extrapolate the observed progress rate to an estimated completion date.

    Likelihood is "high" when completion lands at least 30 days before the
    target date, "moderate" when it lands before the target, "low" after,
    and "unknown" without progress or elapsed time to extrapolate from.
    """
    validate_goal(goal)

    fraction_done = goal.current_amount / goal.target_amount
    days_elapsed = days_between(goal.start_date, as_of)

    if fraction_done >= 1:
        return CompletionForecast(likelihood="high", estimated_completion_date=as_of, on_target=True)
    if fraction_done <= 0 or days_elapsed <= 0:
        return CompletionForecast(likelihood="unknown")

    days_to_finish = math.ceil(days_elapsed * (1 - fraction_done) / fraction_done)
    try:
        estimate = as_of + timedelta(days=days_to_finish)
    except OverflowError:
        return CompletionForecast(likelihood="low", on_target=False)

    if estimate <= goal.target_date - timedelta(days=COMFORT_MARGIN_DAYS):
        likelihood = "high"
    elif estimate <= goal.target_date:
        likelihood = "moderate"
    else:
        likelihood = "low"

    return CompletionForecast(
        likelihood=likelihood,
        estimated_completion_date=estimate,
        on_target=estimate <= goal.target_date,
    )
