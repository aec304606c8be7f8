"""Trend analysis - period comparison, linear projection and pattern classification"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from finance_analytics.domain.aggregation import next_period_start, period_key
from finance_analytics.domain.models import (
    BucketSeries,
    Granularity,
    PatternAnalysis,
    PeriodComparison,
    ProjectionPoint,
    ProjectionSeries,
    SeasonalGroup,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA = "insufficient-data"
MIN_PROJECTION_POINTS = 3

# Confidence falls by this much per projected step, never below the floor
CONFIDENCE_DECAY = 0.1
CONFIDENCE_FLOOR = 0.1

SEASONAL_RATIO = 1.5
IMPROVING_RATIO = 1.1
DECLINING_RATIO = 0.9


def compare_adjacent_periods(
    previous: Union[BucketSeries, float],
    current: Union[BucketSeries, float],
) -> PeriodComparison:
    """
    Compare two consecutive periods by total.

    percent_change is None (not inf/NaN) when the previous total is zero.
    """
    previous_total = previous.total if isinstance(previous, BucketSeries) else float(previous)
    current_total = current.total if isinstance(current, BucketSeries) else float(current)
    delta = current_total - previous_total

    percent_change = (delta / previous_total) * 100 if previous_total != 0 else None

    if delta > 0:
        direction = "increasing"
    elif delta < 0:
        direction = "decreasing"
    else:
        direction = "stable"

    return PeriodComparison(
        previous_total=previous_total,
        current_total=current_total,
        delta=delta,
        percent_change=percent_change,
        direction=direction,
    )


def fit_least_squares(values: Sequence[float]) -> Tuple[float, float]:
    """
    Ordinary least squares of value against index 0..n-1.

    Returns: (slope, intercept)
    """
    n = len(values)
    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        # Single point: flat line through it
        return 0.0, (sum_y / n if n else 0.0)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def projection_confidence(step: int) -> float:
    """Confidence for the step-th projected point (1-based)"""
    return max(CONFIDENCE_FLOOR, round(1.0 - step * CONFIDENCE_DECAY, 10))


def project_values(
    values: Sequence[float],
    periods_ahead: int,
    period_labels: Sequence[str],
) -> ProjectionSeries:
    """
    Fit a line through `values` and extend it `periods_ahead` steps.

    `period_labels` names each projected step. Fewer than three values
    yields an insufficient-data sentinel rather than a fit.
    """
    if len(values) < MIN_PROJECTION_POINTS:
        logger.debug("Projection skipped: %d points", len(values))
        return ProjectionSeries(can_project=False, reason=INSUFFICIENT_DATA)

    slope, intercept = fit_least_squares(values)
    last_index = len(values) - 1

    points = [
        ProjectionPoint(
            step=step,
            period=period_labels[step - 1],
            value=slope * (last_index + step) + intercept,
            confidence=projection_confidence(step),
        )
        for step in range(1, periods_ahead + 1)
    ]

    return ProjectionSeries(
        can_project=True,
        slope=slope,
        intercept=intercept,
        points=tuple(points),
    )


def project_linear(series: BucketSeries, periods_ahead: int) -> ProjectionSeries:
    """Project bucket totals forward, labelling each step with its period key"""
    labels: List[str] = []
    if series.buckets:
        cursor = series.buckets[-1].period_start
        for _ in range(periods_ahead):
            cursor = next_period_start(cursor, series.granularity)
            labels.append(period_key(cursor, series.granularity))

    return project_values(series.totals, periods_ahead, labels)


def _sub_period(series: BucketSeries) -> Optional[Dict[str, int]]:
    """Map each bucket key to its recurring sub-period, None when the granularity has none"""
    if series.granularity == Granularity.MONTH:
        return {b.period_key: b.period_start.month for b in series.buckets}
    if series.granularity == Granularity.WEEK:
        return {b.period_key: b.period_start.isocalendar()[1] for b in series.buckets}
    if series.granularity == Granularity.DAY:
        return {b.period_key: b.period_start.weekday() for b in series.buckets}
    return None


def seasonal_groups(series: BucketSeries) -> Tuple[SeasonalGroup, ...]:
    """Mean bucket total per sub-period (calendar month, ISO week or weekday)"""
    mapping = _sub_period(series)
    if mapping is None:
        return ()

    grouped: Dict[int, List[float]] = {}
    for b in series.buckets:
        grouped.setdefault(mapping[b.period_key], []).append(b.total)

    return tuple(
        SeasonalGroup(sub_period=sub, mean=sum(vals) / len(vals), count=len(vals))
        for sub, vals in sorted(grouped.items())
    )


def detect_seasonal_variation(series: BucketSeries) -> bool:
    """Seasonal when the largest sub-period mean exceeds 1.5x the smallest"""
    groups = seasonal_groups(series)
    if len(groups) <= 1:
        return False
    means = [g.mean for g in groups]
    return max(means) > min(means) * SEASONAL_RATIO


def classify_trend(values: Sequence[float]) -> str:
    """
    Compare first-half and second-half means.

    improving: second > 1.1x first, declining: second < 0.9x first,
    otherwise stable. Fewer than three values is insufficient-data.
    """
    if len(values) < MIN_PROJECTION_POINTS:
        return INSUFFICIENT_DATA

    mid = len(values) // 2
    first_half = values[:mid]
    second_half = values[mid:]
    first_avg = sum(first_half) / len(first_half)
    second_avg = sum(second_half) / len(second_half)

    if second_avg > first_avg * IMPROVING_RATIO:
        return "improving"
    if second_avg < first_avg * DECLINING_RATIO:
        return "declining"
    return "stable"


def analyze_patterns(series: BucketSeries) -> PatternAnalysis:
    """Trend classification plus seasonal-variation flag for a bucket series"""
    trend = classify_trend(series.totals)
    if trend == INSUFFICIENT_DATA:
        return PatternAnalysis(trend=trend)

    groups = seasonal_groups(series)
    patterns = ("seasonal-variation",) if detect_seasonal_variation(series) else ()
    return PatternAnalysis(trend=trend, patterns=patterns, seasonal_groups=groups)
