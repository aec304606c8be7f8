"""Net worth engine - historical snapshots, volatility and forward projection"""

import statistics
from datetime import date
from typing import Dict, List, Optional, Sequence

from finance_analytics.domain.models import (
    NetWorthReport,
    NetWorthSnapshot,
    NetWorthTrend,
    ProjectionSeries,
    Record,
    TransactionType,
)
from finance_analytics.domain.trends import project_values
from finance_analytics.utils.date_utils import add_months, month_end

DEFAULT_ACCOUNT = "default"


def _snapshot(records: Sequence[Record], as_of: date) -> NetWorthSnapshot:
    """Per-account signed balances up to and including `as_of`"""
    balances: Dict[str, float] = {}
    for record in records:
        if record.date > as_of:
            continue
        if record.type == TransactionType.INCOME:
            signed = record.amount
        elif record.type == TransactionType.EXPENSE:
            signed = -record.amount
        else:
            continue
        account = record.account_id or DEFAULT_ACCOUNT
        balances[account] = balances.get(account, 0.0) + signed

    assets = sum(b for b in balances.values() if b > 0)
    liabilities = abs(sum(b for b in balances.values() if b < 0))
    return NetWorthSnapshot(date=as_of, net_worth=assets - liabilities, assets=assets, liabilities=liabilities)


def historical(records: Sequence[Record], months: int, as_of: date) -> List[NetWorthSnapshot]:
    """
    Month-end net worth for the `months` months ending with as_of's month.

    Each account balance is the running sum of income (+) and expenses (-);
    transfers move money between accounts and are left out. Positive
    balances count as assets, negative ones as liabilities.
    """
    # The current month is snapshotted at as_of rather than its month end
    first_of_month = as_of.replace(day=1)
    snapshot_dates = [
        min(month_end(add_months(first_of_month, -i)), as_of) for i in range(months - 1, -1, -1)
    ]
    return [_snapshot(records, day) for day in snapshot_dates]


def volatility(history: Sequence[NetWorthSnapshot]) -> float:
    """Population standard deviation of month-over-month net worth changes"""
    if len(history) < 2:
        return 0.0
    changes = [history[i].net_worth - history[i - 1].net_worth for i in range(1, len(history))]
    return statistics.pstdev(changes)


def _percent_of(change: float, base: float) -> float:
    return change / abs(base) * 100 if base != 0 else 0.0


def analyze_trend(history: Sequence[NetWorthSnapshot]) -> NetWorthTrend:
    if len(history) < 2:
        return NetWorthTrend(trend="insufficient-data")

    first, previous, latest = history[0], history[-2], history[-1]
    change = latest.net_worth - previous.net_worth
    overall_change = latest.net_worth - first.net_worth

    if change > 0:
        trend = "increasing"
    elif change < 0:
        trend = "decreasing"
    else:
        trend = "stable"

    return NetWorthTrend(
        trend=trend,
        monthly_change=change,
        monthly_percentage_change=_percent_of(change, previous.net_worth),
        overall_change=overall_change,
        overall_percentage_change=_percent_of(overall_change, first.net_worth),
        volatility=volatility(history),
    )


def project_forward(history: Sequence[NetWorthSnapshot], months: int) -> Optional[ProjectionSeries]:
    """
    Linear projection of net worth `months` month-ends past the last snapshot.

    Returns None with fewer than three snapshots: a known "cannot project
    yet" state, not an error.
    """
    if len(history) < 3:
        return None

    last = history[-1].date
    labels = [month_end(add_months(last.replace(day=1), i)).isoformat() for i in range(1, months + 1)]
    return project_values([s.net_worth for s in history], months, labels)


def net_worth_report(
    records: Sequence[Record],
    as_of: date,
    months: int = 12,
    projection_months: int = 6,
) -> NetWorthReport:
    """Current net worth with its history, trend and projection"""
    history = historical(records, months, as_of)
    return NetWorthReport(
        as_of=as_of,
        current=_snapshot(records, as_of),
        history=tuple(history),
        trend=analyze_trend(history),
        projection=project_forward(history, projection_months),
    )
