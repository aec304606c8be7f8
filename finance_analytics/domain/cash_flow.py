"""Cash flow analysis - monthly net flow, savings rate and flow patterns"""

from dataclasses import replace
from datetime import date
from typing import List, Sequence, Tuple

from finance_analytics.domain.aggregation import bucket
from finance_analytics.domain.models import (
    Bucket,
    BucketSeries,
    CashFlowMonth,
    CashFlowReport,
    Granularity,
    Record,
    SavingsRateSummary,
    TransactionType,
)
from finance_analytics.domain.trends import analyze_patterns, project_linear


def _savings_rate(income: float, expenses: float) -> float:
    return (income - expenses) / income * 100 if income > 0 else 0.0


def monthly_cash_flow(records: Sequence[Record]) -> Tuple[CashFlowMonth, ...]:
    """Income, expenses and net flow per calendar month, oldest first"""
    income = bucket([r for r in records if r.type == TransactionType.INCOME], Granularity.MONTH)
    expenses = bucket([r for r in records if r.type == TransactionType.EXPENSE], Granularity.MONTH)

    income_by_key = {b.period_key: b.total for b in income.buckets}
    expense_by_key = {b.period_key: b.total for b in expenses.buckets}

    months = []
    for key in sorted(set(income_by_key) | set(expense_by_key)):
        month_income = income_by_key.get(key, 0.0)
        month_expenses = expense_by_key.get(key, 0.0)
        months.append(
            CashFlowMonth(
                period_key=key,
                income=month_income,
                expenses=month_expenses,
                net_flow=month_income - month_expenses,
                savings_rate=_savings_rate(month_income, month_expenses),
            )
        )
    return tuple(months)


def running_balance(months: Sequence[CashFlowMonth], starting_balance: float = 0.0) -> Tuple[CashFlowMonth, ...]:
    balance = starting_balance
    result = []
    for month in months:
        balance += month.net_flow
        result.append(replace(month, running_balance=balance))
    return tuple(result)


def savings_rate_summary(months: Sequence[CashFlowMonth]) -> SavingsRateSummary:
    if not months:
        return SavingsRateSummary(average=0.0)

    return SavingsRateSummary(
        average=sum(m.savings_rate for m in months) / len(months),
        best=max(months, key=lambda m: m.savings_rate),
        worst=min(months, key=lambda m: m.savings_rate),
    )


def _net_flow_series(months: Sequence[CashFlowMonth]) -> BucketSeries:
    """Net flow per month as a bucket series so trend tools can consume it"""
    buckets: List[Bucket] = []
    for month in months:
        year, month_number = (int(part) for part in month.period_key.split("-"))
        buckets.append(
            Bucket(
                period_key=month.period_key,
                period_start=date(year, month_number, 1),
                total=month.net_flow,
                count=1,
                average=month.net_flow,
            )
        )
    return BucketSeries(granularity=Granularity.MONTH, buckets=tuple(buckets))


def analyze_cash_flow(
    records: Sequence[Record],
    periods_ahead: int = 6,
    starting_balance: float = 0.0,
) -> CashFlowReport:
    """
    Monthly cash flow with running balance, savings rates, trend/seasonal
    patterns over net flow, and a linear projection of future net flow.
    """
    months = running_balance(monthly_cash_flow(records), starting_balance)
    series = _net_flow_series(months)

    return CashFlowReport(
        months=months,
        savings_rate=savings_rate_summary(months),
        patterns=analyze_patterns(series),
        projection=project_linear(series, periods_ahead),
    )
