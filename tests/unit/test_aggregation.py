"""Unit tests for time bucket aggregation"""

import pytest
from datetime import date
from finance_analytics.domain.aggregation import bucket, next_period_start, period_key, period_start
from finance_analytics.domain.exceptions import InvalidInputError
from finance_analytics.domain.models import Contribution, Granularity, Record, TransactionType


def _expense(day: date, amount: float) -> Record:
    return Record(
        transaction_id=f"tx_{day.isoformat()}_{amount}",
        amount=amount,
        type=TransactionType.EXPENSE,
        date=day,
        category_id="groceries",
    )


def test_period_key_formats():
    """Test key format for each granularity"""
    day = date(2024, 3, 15)
    assert period_key(day, Granularity.DAY) == "2024-03-15"
    assert period_key(day, Granularity.WEEK) == "2024-W11"
    assert period_key(day, Granularity.MONTH) == "2024-03"
    assert period_key(day, Granularity.YEAR) == "2024"


def test_week_key_uses_iso_year():
    """Test that early January days belong to the previous ISO year when applicable"""
    assert period_key(date(2021, 1, 2), Granularity.WEEK) == "2020-W53"


def test_period_start_week_begins_monday():
    """Test weekly truncation to Monday"""
    assert period_start(date(2024, 3, 17), Granularity.WEEK) == date(2024, 3, 11)
    assert period_start(date(2024, 3, 11), Granularity.WEEK) == date(2024, 3, 11)


def test_next_period_start_month_end_of_year():
    assert next_period_start(date(2023, 12, 1), Granularity.MONTH) == date(2024, 1, 1)
    assert next_period_start(date(2023, 1, 1), Granularity.YEAR) == date(2024, 1, 1)


def test_bucket_monthly_totals_counts_and_averages():
    """Test monthly aggregation sorted chronologically"""
    records = [
        _expense(date(2024, 2, 10), 50.0),
        _expense(date(2024, 1, 5), 100.0),
        _expense(date(2024, 1, 20), 200.0),
    ]

    series = bucket(records, Granularity.MONTH)

    assert [b.period_key for b in series.buckets] == ["2024-01", "2024-02"]
    january = series.buckets[0]
    assert january.total == 300.0
    assert january.count == 2
    assert january.average == 150.0
    assert series.total == 350.0


def test_bucket_sparse_omits_empty_periods():
    """Test that sparse output skips months without records"""
    records = [_expense(date(2024, 1, 5), 10.0), _expense(date(2024, 4, 5), 20.0)]

    series = bucket(records, "month")

    assert len(series) == 2


def test_bucket_dense_zero_fills_gaps():
    """Test dense output covers every month between first and last"""
    records = [_expense(date(2024, 1, 5), 10.0), _expense(date(2024, 4, 5), 20.0)]

    series = bucket(records, Granularity.MONTH, dense=True)

    assert [b.period_key for b in series.buckets] == ["2024-01", "2024-02", "2024-03", "2024-04"]
    assert series.buckets[1].total == 0.0
    assert series.buckets[1].count == 0
    assert series.buckets[1].average == 0.0


def test_bucket_dense_explicit_range_widens():
    """Test dense output extends to an explicit start and end"""
    records = [_expense(date(2024, 3, 5), 10.0)]

    series = bucket(records, Granularity.MONTH, dense=True, start=date(2024, 1, 15), end=date(2024, 5, 2))

    assert [b.period_key for b in series.buckets] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05"]
    assert series.total == 10.0


def test_bucket_empty_input():
    """Test empty input yields an empty series, not an error"""
    series = bucket([], Granularity.WEEK)

    assert series.buckets == ()
    assert series.total == 0


def test_bucket_accepts_contributions():
    """Test goal contributions aggregate like records"""
    contributions = [Contribution(100.0, date(2024, 1, 1)), Contribution(50.0, date(2024, 1, 31))]

    series = bucket(contributions, Granularity.YEAR)

    assert series.buckets[0].period_key == "2024"
    assert series.buckets[0].total == 150.0


def test_bucket_preserves_total():
    """Test that bucket totals sum to the record total"""
    records = [_expense(date(2024, 1, d), float(d)) for d in range(1, 29)]

    for granularity in Granularity:
        assert bucket(records, granularity).total == pytest.approx(sum(range(1, 29)))


def test_bucket_unknown_granularity():
    """Test that an unknown granularity is rejected"""
    with pytest.raises(InvalidInputError):
        bucket([], "fortnight")
