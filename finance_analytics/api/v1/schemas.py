"""Pydantic schemas for API responses that wrap engine results"""

from pydantic import BaseModel
from datetime import date
from typing import List

from finance_analytics.domain.models import (
    BucketSeries,
    CompletionForecast,
    HealthScore,
    Milestone,
    NetWorthSnapshot,
    PatternAnalysis,
    PeriodComparison,
    ProgressMetrics,
    ProjectionSeries,
    SpendingSummary,
    Violation,
)


class GoalProgressResponse(BaseModel):
    """Response for GET /v1/goals/{goal_id}/progress"""

    goal_id: str
    name: str
    as_of: date
    metrics: ProgressMetrics
    achievement_probability: float
    milestones: List[Milestone]
    forecast: CompletionForecast
    contribution_trends: BucketSeries


class SpendingTrendsResponse(BaseModel):
    """Response for GET /v1/reports/spending-trends"""

    user_id: str
    start: date
    end: date
    series: BucketSeries
    comparison: PeriodComparison
    patterns: PatternAnalysis
    projection: ProjectionSeries
    summary: SpendingSummary


class GoalSnapshotItem(BaseModel):
    """Single persisted goal snapshot"""

    snapshot_id: str
    achievement_probability: float
    progress_percentage: float
    timeline_progress: float
    schedule_status: str
    created_at: str


class GoalHistoryResponse(BaseModel):
    """Response for GET /v1/goals/{goal_id}/history"""

    user_id: str
    goal_id: str
    snapshots: List[GoalSnapshotItem]


class BudgetSnapshotItem(BaseModel):
    """Single persisted budget health snapshot"""

    snapshot_id: str
    health_score: float
    health_level: str
    burn_rate: float
    created_at: str


class BudgetHistoryResponse(BaseModel):
    """Response for GET /v1/budgets/{budget_id}/history"""

    user_id: str
    budget_id: str
    snapshots: List[BudgetSnapshotItem]


class BudgetSummary(BaseModel):
    budget_id: str
    name: str
    burn_rate: float
    is_on_track: bool
    health: HealthScore
    violations: List[Violation]


class GoalSummary(BaseModel):
    goal_id: str
    name: str
    progress_percentage: float
    achievement_probability: float
    schedule_status: str


class OverviewResponse(BaseModel):
    """Response for GET /v1/reports/overview"""

    user_id: str
    as_of: date
    month_income: float
    month_expenses: float
    spending_change: PeriodComparison
    net_worth: NetWorthSnapshot
    income_diversification: float
    budgets: List[BudgetSummary]
    goals: List[GoalSummary]
    skipped: List[str] = []
