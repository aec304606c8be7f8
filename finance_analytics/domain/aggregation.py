"""Time bucket aggregation - groups dated amounts into day/week/month/year periods"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Union

from finance_analytics.domain.models import Bucket, BucketSeries, Contribution, Granularity, Record
from finance_analytics.domain.validation import validate_granularity
from finance_analytics.utils.date_utils import add_months

Dated = Union[Record, Contribution]


def period_start(day: date, granularity: Granularity) -> date:
    """Truncate a date to the first day of its period (weeks start on Monday)"""
    if granularity == Granularity.DAY:
        return day
    if granularity == Granularity.WEEK:
        return day - timedelta(days=day.weekday())
    if granularity == Granularity.MONTH:
        return day.replace(day=1)
    return day.replace(month=1, day=1)


def next_period_start(start: date, granularity: Granularity) -> date:
    """First day of the period following the one beginning at `start`"""
    if granularity == Granularity.DAY:
        return start + timedelta(days=1)
    if granularity == Granularity.WEEK:
        return start + timedelta(weeks=1)
    if granularity == Granularity.MONTH:
        return add_months(start, 1)
    return add_months(start, 12)


def period_key(day: date, granularity: Granularity) -> str:
    """
    Stable key for the period containing `day`.

    Formats: day "2024-03-15", week "2024-W11" (ISO week), month "2024-03",
    year "2024".
    """
    if granularity == Granularity.DAY:
        return day.isoformat()
    if granularity == Granularity.WEEK:
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if granularity == Granularity.MONTH:
        return f"{day.year}-{day.month:02d}"
    return str(day.year)


def bucket(
    records: Iterable[Dated],
    granularity: Union[Granularity, str],
    dense: bool = False,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> BucketSeries:
    """
    Aggregate records into chronologically sorted buckets.

    Each record contributes its amount to the bucket keyed by its date
    truncated to `granularity`. The series is sparse unless `dense` is set,
    in which case every period between the first and last (or `start` and
    `end` when given) is present, zero-filled where no records fall.

    Empty input returns an empty series.
    """
    granularity = validate_granularity(granularity)

    totals: Dict[date, float] = {}
    counts: Dict[date, int] = {}
    for record in records:
        key_start = period_start(record.date, granularity)
        totals[key_start] = totals.get(key_start, 0.0) + record.amount
        counts[key_start] = counts.get(key_start, 0) + 1

    if dense:
        starts = _dense_range(totals.keys(), granularity, start, end)
    else:
        starts = sorted(totals)

    buckets: List[Bucket] = []
    for bucket_start in starts:
        total = totals.get(bucket_start, 0.0)
        count = counts.get(bucket_start, 0)
        buckets.append(
            Bucket(
                period_key=period_key(bucket_start, granularity),
                period_start=bucket_start,
                total=total,
                count=count,
                average=total / count if count else 0.0,
            )
        )

    return BucketSeries(granularity=granularity, buckets=tuple(buckets))


def _dense_range(
    observed: Iterable[date],
    granularity: Granularity,
    start: Optional[date],
    end: Optional[date],
) -> List[date]:
    """Every period start from the first to the last period, inclusive"""
    # An explicit range only widens the observed one, so no bucket is dropped
    lower = sorted(observed)
    upper = list(lower)
    if start:
        lower.insert(0, period_start(start, granularity))
    if end:
        upper.append(period_start(end, granularity))
    if not lower or not upper:
        return []
    first, last = min(lower), max(upper)

    starts = []
    current = first
    while current <= last:
        starts.append(current)
        current = next_period_start(current, granularity)
    return starts
