"""Income analysis - source concentration (HHI) and recurring income detection"""

import statistics
from typing import Dict, Iterable, List, Sequence, Tuple

from finance_analytics.domain.models import (
    DiversificationScore,
    IncomeReport,
    IncomeSource,
    Record,
    RecurringSource,
    TransactionType,
)
from finance_analytics.domain.trends import compare_adjacent_periods

RECURRING_CV_THRESHOLD = 0.1
MIN_RECURRING_OCCURRENCES = 2


def group_sources(records: Iterable[Record]) -> Tuple[IncomeSource, ...]:
    """Group income records by payee, then description, then category; largest source first"""
    grouped: Dict[str, List[Record]] = {}
    for record in records:
        if record.type != TransactionType.INCOME:
            continue
        grouped.setdefault(record.payee or record.description or record.category_id, []).append(record)

    sources = []
    for name, items in grouped.items():
        items.sort(key=lambda r: r.date)
        sources.append(
            IncomeSource(
                source=name,
                amounts=tuple(r.amount for r in items),
                dates=tuple(r.date for r in items),
            )
        )

    return tuple(sorted(sources, key=lambda s: (-s.total, s.source)))


def _market_shares(sources: Sequence[IncomeSource]) -> List[Tuple[str, float]]:
    total = sum(s.total for s in sources)
    if total <= 0:
        return [(s.source, 0.0) for s in sources]
    return [(s.source, s.total / total * 100) for s in sources]


def concentration(sources: Sequence[IncomeSource]) -> DiversificationScore:
    """
    Herfindahl-Hirschman concentration of income across sources.

    HHI = sum of squared percentage shares (10,000 = one source).
    Score = max(0, 100 - HHI/100): 0 when fully concentrated, approaching
    100 as income spreads over many equal sources.
    """
    shares = _market_shares(sources)
    hhi = sum(share * share for _, share in shares)

    if len(sources) <= 1 or sum(s.total for s in sources) <= 0:
        score = 0.0
    else:
        score = max(0.0, 100 - hhi / 100)

    return DiversificationScore(
        score=score,
        hhi=hhi,
        source_count=len(sources),
        shares=tuple(shares),
    )


def diversification(sources: Sequence[IncomeSource]) -> float:
    """Diversification score in [0, 100]"""
    return concentration(sources).score


def recurring(sources: Sequence[IncomeSource]) -> Tuple[RecurringSource, ...]:
    """
    Sources paying near-identical amounts repeatedly.

    A source is recurring with at least two payments and a coefficient of
    variation (population stddev / mean) under 0.1. Reliability is
    1 - mean absolute deviation / mean.
    """
    results = []
    for source in sources:
        amounts = source.amounts
        if len(amounts) < MIN_RECURRING_OCCURRENCES:
            continue

        mean = statistics.fmean(amounts)
        if mean <= 0:
            continue

        cv = statistics.pstdev(amounts) / mean
        if cv >= RECURRING_CV_THRESHOLD:
            continue

        mad = sum(abs(a - mean) for a in amounts) / len(amounts)
        results.append(
            RecurringSource(
                source=source.source,
                estimated_amount=mean,
                frequency=len(amounts),
                coefficient_of_variation=cv,
                reliability=1 - mad / mean,
            )
        )

    return tuple(results)


def analyze_income(records: Sequence[Record], previous_records: Sequence[Record] = ()) -> IncomeReport:
    """
    Income summary for a period, compared with the preceding period.

    `previous_records` holds the period of equal length immediately before.
    """
    sources = group_sources(records)
    previous_total = sum(r.amount for r in previous_records if r.type == TransactionType.INCOME)
    total_income = sum(s.total for s in sources)

    return IncomeReport(
        total_income=total_income,
        source_count=len(sources),
        sources=tuple((s.source, s.total) for s in sources),
        diversification=concentration(sources),
        recurring_income=recurring(sources),
        growth=compare_adjacent_periods(previous_total, total_income),
    )
