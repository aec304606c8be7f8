"""Unit tests for spending breakdowns"""

import pytest
from datetime import date
from finance_analytics.domain.exceptions import InvalidInputError
from finance_analytics.domain.models import Category, Record, TransactionType
from finance_analytics.domain.spending import (
    average_daily_spending,
    category_breakdown,
    spending_summary,
    top_payees,
)

CATEGORIES = [
    Category("housing", "Housing", TransactionType.EXPENSE),
    Category("groceries", "Groceries", TransactionType.EXPENSE),
]


def test_category_breakdown_largest_first(sample_records: list[Record]):
    """Test expense totals, counts and extremes per category"""
    breakdown = category_breakdown(sample_records, CATEGORIES)

    assert [c.category_id for c in breakdown] == ["housing", "groceries"]
    housing, groceries = breakdown
    assert housing.category_name == "Housing"
    assert housing.total_amount == 7200.0
    assert housing.transaction_count == 6
    assert groceries.min_amount == 320.0
    assert groceries.max_amount == 420.0
    assert groceries.average_amount == pytest.approx(370.0)


def test_category_breakdown_unknown_category_unnamed():
    records = [Record("1", 20.0, TransactionType.EXPENSE, date(2024, 1, 1), "pets")]

    breakdown = category_breakdown(records, CATEGORIES)

    assert breakdown[0].category_name is None


def test_category_breakdown_ignores_income(sample_records: list[Record]):
    breakdown = category_breakdown(sample_records)

    assert {c.category_id for c in breakdown} == {"housing", "groceries"}


def test_top_payees_ranked_and_limited():
    records = [
        Record(str(i), float(i), TransactionType.EXPENSE, date(2024, 1, 1), "misc", payee=f"Shop {i}")
        for i in range(1, 16)
    ]

    payees = top_payees(records, limit=3)

    assert [p.payee for p in payees] == ["Shop 15", "Shop 14", "Shop 13"]


def test_top_payees_falls_back_to_description():
    records = [
        Record("1", 12.0, TransactionType.EXPENSE, date(2024, 1, 1), "dining", description="Coffee"),
        Record("2", 8.0, TransactionType.EXPENSE, date(2024, 1, 2), "dining", description="Coffee"),
        Record("3", 5.0, TransactionType.EXPENSE, date(2024, 1, 3), "dining"),
    ]

    payees = top_payees(records)

    assert len(payees) == 1
    assert payees[0].payee == "Coffee"
    assert payees[0].total_amount == 20.0
    assert payees[0].transaction_count == 2


def test_average_daily_spending_inclusive_days():
    records = [Record("1", 310.0, TransactionType.EXPENSE, date(2024, 1, 10), "misc")]

    assert average_daily_spending(records, date(2024, 1, 1), date(2024, 1, 31)) == pytest.approx(10.0)
    assert average_daily_spending([], date(2024, 1, 1), date(2024, 1, 1)) == 0.0


def test_average_daily_spending_inverted_window():
    with pytest.raises(InvalidInputError):
        average_daily_spending([], date(2024, 2, 1), date(2024, 1, 1))


def test_spending_summary(sample_records: list[Record]):
    summary = spending_summary(sample_records, date(2024, 1, 1), date(2024, 6, 30), CATEGORIES)

    assert summary.total_spending == pytest.approx(9420.0)
    assert summary.transaction_count == 12
    assert summary.categories_count == 2
    assert summary.average_daily_spending == pytest.approx(9420.0 / 182)
    assert summary.top_payees[0].payee == "Landlord"
