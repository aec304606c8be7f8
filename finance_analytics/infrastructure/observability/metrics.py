"""Prometheus metrics for analytics volume, score distributions and record store health"""

from prometheus_client import Counter, Histogram

# Analytics metrics
analytics_counter = Counter(
    "finance_analytics_computations_total",
    "Analytics computations served",
    ["kind", "outcome"],  # outcome: computed | insufficient_data
)

budget_health_histogram = Histogram(
    "finance_budget_health_score",
    "Budget health scores issued",
    buckets=[20, 40, 60, 75, 90, 100],
)

goal_probability_histogram = Histogram(
    "finance_goal_achievement_probability",
    "Goal achievement probabilities issued",
    buckets=[10, 25, 50, 75, 90, 100],
)

# Record store metrics
record_store_failures_counter = Counter(
    "record_store_failures_total",
    "Failed record store calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analytics(kind: str, can_project: bool = True) -> None:
    """Count a computation, separating sentinel (insufficient data) results"""
    outcome = "computed" if can_project else "insufficient_data"
    analytics_counter.labels(kind=kind, outcome=outcome).inc()


def record_budget_health(score: float) -> None:
    budget_health_histogram.observe(score)
    record_analytics("budget_performance")


def record_goal_probability(probability: float) -> None:
    goal_probability_histogram.observe(probability)
    record_analytics("goal_progress")
