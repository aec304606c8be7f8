"""Report endpoints - spending trends, income, cash flow, net worth and overview"""

import asyncio
import time
from datetime import date, timedelta
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, Query, Request

from finance_analytics.api.dependencies import get_as_of, get_record_store_client, get_request_id
from finance_analytics.api.errors import to_http_exception
from finance_analytics.api.v1.schemas import BudgetSummary, GoalSummary, OverviewResponse, SpendingTrendsResponse
from finance_analytics.config import settings
from finance_analytics.domain import budgets, goals
from finance_analytics.domain.aggregation import bucket
from finance_analytics.domain.cash_flow import analyze_cash_flow
from finance_analytics.domain.exceptions import DomainException, InvalidInputError
from finance_analytics.domain.income import analyze_income, diversification, group_sources
from finance_analytics.domain.models import (
    CashFlowReport,
    Granularity,
    IncomeReport,
    NetWorthReport,
    TransactionType,
)
from finance_analytics.domain.net_worth import net_worth_report
from finance_analytics.domain.spending import spending_summary
from finance_analytics.domain.trends import analyze_patterns, compare_adjacent_periods, project_linear
from finance_analytics.infrastructure.clients.record_store import RecordStoreClient
from finance_analytics.infrastructure.observability.logging import log_analytics
from finance_analytics.infrastructure.observability.metrics import record_analytics
from finance_analytics.utils.date_utils import add_months

router = APIRouter()


def resolve_window(start: Optional[date], end: Optional[date], as_of: date) -> Tuple[date, date, date, date]:
    """
    Current [start, end] window (default: six months to as_of) and the
    equal-length window immediately before it.
    """
    end = end or as_of
    start = start or add_months(end, -6)
    if start > end:
        raise InvalidInputError("start must not be after end")
    previous_end = start - timedelta(days=1)
    previous_start = previous_end - (end - start)
    return start, end, previous_start, previous_end


@router.get("/reports/spending-trends", response_model=SpendingTrendsResponse)
async def get_spending_trends(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    granularity: Granularity = Query(Granularity.MONTH),
    periods_ahead: int = Query(settings.default_projection_periods, ge=1, le=24),
    dense: bool = Query(False, description="Zero-fill periods without spending"),
    as_of: date = Depends(get_as_of),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """
    Expense totals per period with the change against the prior window,
    patterns, projection, and a category and payee breakdown
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        start, end, previous_start, previous_end = resolve_window(start, end, as_of)
        current, previous, categories = await asyncio.gather(
            record_store.get_transactions(user_id, start, end, type=TransactionType.EXPENSE),
            record_store.get_transactions(user_id, previous_start, previous_end, type=TransactionType.EXPENSE),
            record_store.get_categories(user_id),
        )
    except DomainException as e:
        raise to_http_exception(e, request_id)

    series = bucket(current, granularity, dense=dense, start=start if dense else None, end=end if dense else None)
    projection = project_linear(series, periods_ahead)
    patterns = analyze_patterns(series)

    record_analytics("spending_trends", projection.can_project)
    log_analytics(
        request_id,
        user_id,
        "spending_trends",
        (time.time() - start_time) * 1000,
        buckets=len(series),
        trend=patterns.trend,
    )

    return SpendingTrendsResponse(
        user_id=user_id,
        start=start,
        end=end,
        series=series,
        comparison=compare_adjacent_periods(bucket(previous, granularity), series),
        patterns=patterns,
        projection=projection,
        summary=spending_summary(current, start, end, categories),
    )


@router.get("/reports/income", response_model=IncomeReport)
async def get_income_report(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    as_of: date = Depends(get_as_of),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """Income sources, diversification, recurring income and growth"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        start, end, previous_start, previous_end = resolve_window(start, end, as_of)
        current, previous = await asyncio.gather(
            record_store.get_transactions(user_id, start, end, type=TransactionType.INCOME),
            record_store.get_transactions(user_id, previous_start, previous_end, type=TransactionType.INCOME),
        )
    except DomainException as e:
        raise to_http_exception(e, request_id)

    report = analyze_income(current, previous)

    record_analytics("income")
    log_analytics(
        request_id,
        user_id,
        "income",
        (time.time() - start_time) * 1000,
        diversification=report.diversification.score,
        recurring_sources=len(report.recurring_income),
    )
    return report


@router.get("/reports/cash-flow", response_model=CashFlowReport)
async def get_cash_flow(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    periods_ahead: int = Query(settings.default_projection_periods, ge=1, le=24),
    as_of: date = Depends(get_as_of),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """Monthly cash flow with savings rate, patterns and net-flow projection"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        start, end, _, _ = resolve_window(start, end, as_of)
        records = await record_store.get_transactions(user_id, start, end)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    report = analyze_cash_flow(records, periods_ahead)

    record_analytics("cash_flow", report.projection.can_project)
    log_analytics(request_id, user_id, "cash_flow", (time.time() - start_time) * 1000, trend=report.patterns.trend)
    return report


@router.get("/reports/net-worth", response_model=NetWorthReport)
async def get_net_worth(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    months: int = Query(settings.net_worth_history_months, ge=1, le=120),
    projection_months: int = Query(settings.default_projection_periods, ge=1, le=60),
    as_of: date = Depends(get_as_of),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """
    Net worth history, trend and projection.

    The projection is null until at least three monthly snapshots exist.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        records = await record_store.get_transactions(user_id, end=as_of)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    report = net_worth_report(records, as_of, months=months, projection_months=projection_months)

    record_analytics("net_worth", report.projection is not None)
    log_analytics(
        request_id,
        user_id,
        "net_worth",
        (time.time() - start_time) * 1000,
        net_worth=report.current.net_worth,
        volatility=report.trend.volatility,
    )
    return report


@router.get("/reports/overview", response_model=OverviewResponse)
async def get_overview(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    as_of: date = Depends(get_as_of),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """
    Dashboard summary across transactions, budgets and goals.

    The three collections are fetched concurrently; budgets or goals that
    break their invariants are listed in `skipped` instead of failing the
    whole overview.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        records, user_budgets, user_goals = await asyncio.gather(
            record_store.get_transactions(user_id, end=as_of),
            record_store.get_budgets(user_id),
            record_store.get_goals(user_id),
        )
    except DomainException as e:
        raise to_http_exception(e, request_id)

    month_start = as_of.replace(day=1)
    previous_month_start = add_months(month_start, -1)
    year_ago = add_months(as_of, -12)

    this_month = [r for r in records if r.date >= month_start]
    last_month = [r for r in records if previous_month_start <= r.date < month_start]

    def expense_total(items):
        return sum(r.amount for r in items if r.type == TransactionType.EXPENSE)

    skipped = []
    budget_summaries = []
    for budget in user_budgets:
        try:
            report = budgets.evaluate(budget, as_of, include_recommendations=False)
        except InvalidInputError:
            skipped.append(f"budget:{budget.budget_id}")
            continue
        budget_summaries.append(
            BudgetSummary(
                budget_id=budget.budget_id,
                name=budget.name,
                burn_rate=report.burn_rate,
                is_on_track=report.is_on_track,
                health=report.health,
                violations=list(report.violations),
            )
        )

    goal_summaries = []
    for goal in user_goals:
        try:
            progress = goals.metrics(goal, as_of)
        except InvalidInputError:
            skipped.append(f"goal:{goal.goal_id}")
            continue
        goal_summaries.append(
            GoalSummary(
                goal_id=goal.goal_id,
                name=goal.name,
                progress_percentage=progress.progress_percentage,
                achievement_probability=goals.achievement_probability(goal, as_of, progress),
                schedule_status=progress.schedule_status,
            )
        )

    net_worth = net_worth_report(records, as_of, months=1).current

    record_analytics("overview")
    log_analytics(
        request_id,
        user_id,
        "overview",
        (time.time() - start_time) * 1000,
        budgets=len(budget_summaries),
        goals=len(goal_summaries),
        skipped=len(skipped),
    )

    return OverviewResponse(
        user_id=user_id,
        as_of=as_of,
        month_income=sum(r.amount for r in this_month if r.type == TransactionType.INCOME),
        month_expenses=expense_total(this_month),
        spending_change=compare_adjacent_periods(expense_total(last_month), expense_total(this_month)),
        net_worth=net_worth,
        income_diversification=diversification(group_sources(r for r in records if r.date >= year_ago)),
        budgets=budget_summaries,
        goals=goal_summaries,
        skipped=skipped,
    )
