"""Spending breakdown - totals per category and payee, average daily spend"""

from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

from finance_analytics.domain.exceptions import InvalidInputError
from finance_analytics.domain.models import (
    Category,
    CategorySpending,
    PayeeSpending,
    Record,
    SpendingSummary,
    TransactionType,
)
from finance_analytics.utils.date_utils import days_between

TOP_PAYEES_LIMIT = 10


def _expenses(records: Iterable[Record]) -> List[Record]:
    return [r for r in records if r.type == TransactionType.EXPENSE]


def category_breakdown(
    records: Iterable[Record],
    categories: Iterable[Category] = (),
) -> Tuple[CategorySpending, ...]:
    """
    Expense totals per category, largest first.

    `categories` only supplies display names; records in unknown categories
    are still counted, with a None name.
    """
    names = {c.category_id: c.name for c in categories}

    grouped: Dict[str, List[float]] = {}
    for record in _expenses(records):
        grouped.setdefault(record.category_id, []).append(record.amount)

    breakdown = [
        CategorySpending(
            category_id=category_id,
            category_name=names.get(category_id),
            total_amount=sum(amounts),
            transaction_count=len(amounts),
            average_amount=sum(amounts) / len(amounts),
            min_amount=min(amounts),
            max_amount=max(amounts),
        )
        for category_id, amounts in grouped.items()
    ]
    return tuple(sorted(breakdown, key=lambda c: (-c.total_amount, c.category_id)))


def top_payees(records: Iterable[Record], limit: int = TOP_PAYEES_LIMIT) -> Tuple[PayeeSpending, ...]:
    """Largest expense payees, keyed by payee and falling back to description"""
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for record in _expenses(records):
        payee = record.payee or record.description
        if not payee:
            continue
        totals[payee] = totals.get(payee, 0.0) + record.amount
        counts[payee] = counts.get(payee, 0) + 1

    ranked = sorted(totals, key=lambda p: (-totals[p], p))[:limit]
    return tuple(PayeeSpending(payee=p, total_amount=totals[p], transaction_count=counts[p]) for p in ranked)


def average_daily_spending(records: Iterable[Record], start: date, end: date) -> float:
    """
    Expense total divided by the number of days in [start, end], both inclusive.

    Raises:
        InvalidInputError: if start is after end
    """
    if start > end:
        raise InvalidInputError("start must not be after end")
    days = days_between(start, end) + 1
    return sum(r.amount for r in _expenses(records)) / days


def spending_summary(
    records: Sequence[Record],
    start: date,
    end: date,
    categories: Iterable[Category] = (),
) -> SpendingSummary:
    """Totals, average daily spend and category/payee breakdowns for a window"""
    breakdown = category_breakdown(records, categories)
    return SpendingSummary(
        total_spending=sum(c.total_amount for c in breakdown),
        average_daily_spending=average_daily_spending(records, start, end),
        transaction_count=sum(c.transaction_count for c in breakdown),
        categories_count=len(breakdown),
        categories=breakdown,
        top_payees=top_payees(records),
    )
