"""Input contract checks for records handed to the engine"""

from finance_analytics.domain.models import Budget, Goal, Granularity
from finance_analytics.domain.exceptions import InvalidInputError

# Tolerance for float rounding when comparing allocation sums
ALLOCATION_EPSILON = 0.01


def validate_budget(budget: Budget) -> None:
    """
    Reject budgets that violate the record store's invariants.

    Raises:
        InvalidInputError: non-positive total, inverted dates, negative
            allocations, or allocations summing above the total
    """
    if budget.total_amount <= 0:
        raise InvalidInputError(f"Budget {budget.budget_id}: total_amount must be positive")
    if budget.start_date >= budget.end_date:
        raise InvalidInputError(f"Budget {budget.budget_id}: start_date must precede end_date")

    for allocation in budget.category_allocations:
        if allocation.allocated_amount < 0 or allocation.spent_amount < 0:
            raise InvalidInputError(
                f"Budget {budget.budget_id}: negative amount in category {allocation.category_id}"
            )

    allocated = sum(a.allocated_amount for a in budget.category_allocations)
    if allocated > budget.total_amount + ALLOCATION_EPSILON:
        raise InvalidInputError(
            f"Budget {budget.budget_id}: allocations ({allocated:.2f}) exceed total ({budget.total_amount:.2f})"
        )


def validate_goal(goal: Goal) -> None:
    """
    Reject goals that violate the record store's invariants.

    Raises:
        InvalidInputError: non-positive target, negative balance, inverted
            dates, non-positive contributions, or milestones outside (0, 200]
    """
    if goal.target_amount <= 0:
        raise InvalidInputError(f"Goal {goal.goal_id}: target_amount must be positive")
    if goal.current_amount < 0:
        raise InvalidInputError(f"Goal {goal.goal_id}: current_amount cannot be negative")
    if goal.start_date >= goal.target_date:
        raise InvalidInputError(f"Goal {goal.goal_id}: start_date must precede target_date")
    if any(c.amount <= 0 for c in goal.contributions):
        raise InvalidInputError(f"Goal {goal.goal_id}: contributions must be positive")
    if any(not 0 < p <= 200 for p in goal.milestone_percentages):
        raise InvalidInputError(f"Goal {goal.goal_id}: milestone percentages must be in (0, 200]")


def validate_granularity(value) -> Granularity:
    """Coerce a granularity name into the enum"""
    try:
        return Granularity(value)
    except ValueError as e:
        raise InvalidInputError(f"Unknown granularity: {value!r}") from e
