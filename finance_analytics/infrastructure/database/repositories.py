"""Data access layer for persisted analytics snapshots"""

from dataclasses import asdict
from typing import List, Sequence
from sqlalchemy.orm import Session
from finance_analytics.infrastructure.database.models import BudgetHealthSnapshot, GoalAnalyticsSnapshot
from finance_analytics.domain.models import Milestone, PerformanceReport, ProgressMetrics


class GoalSnapshotRepository:
    """Repository for goal analytics snapshots"""

    def __init__(self, db: Session):
        self.db = db

    def create_snapshot(
        self,
        user_id: str,
        goal_id: str,
        probability: float,
        progress: ProgressMetrics,
        milestones: Sequence[Milestone],
    ) -> GoalAnalyticsSnapshot:
        """Persist the derived goal fields"""
        snapshot = GoalAnalyticsSnapshot(
            goal_id=goal_id,
            user_id=user_id,
            achievement_probability=probability,
            progress_percentage=progress.progress_percentage,
            timeline_progress=progress.timeline_progress,
            required_monthly_contribution=progress.required_monthly_contribution,
            schedule_status=progress.schedule_status,
            milestones=[
                {
                    "percentage": m.percentage,
                    "amount": m.amount,
                    "achieved": m.achieved,
                    "achieved_date": m.achieved_date.isoformat() if m.achieved_date else None,
                }
                for m in milestones
            ],
        )
        self.db.add(snapshot)
        self.db.flush()  # Get ID without committing
        return snapshot

    def get_snapshots(self, user_id: str, goal_id: str, limit: int = 20) -> List[GoalAnalyticsSnapshot]:
        """Most recent snapshots for a goal"""
        return (
            self.db.query(GoalAnalyticsSnapshot)
            .filter(GoalAnalyticsSnapshot.user_id == user_id, GoalAnalyticsSnapshot.goal_id == goal_id)
            .order_by(GoalAnalyticsSnapshot.created_at.desc())
            .limit(limit)
            .all()
        )


class BudgetSnapshotRepository:
    """Repository for budget health snapshots"""

    def __init__(self, db: Session):
        self.db = db

    def create_snapshot(self, user_id: str, report: PerformanceReport) -> BudgetHealthSnapshot:
        """Persist the health score of a performance report"""
        snapshot = BudgetHealthSnapshot(
            budget_id=report.budget_id,
            user_id=user_id,
            health_score=report.health.score,
            health_level=report.health.health_level,
            burn_rate=report.burn_rate,
            time_progress=report.time_progress,
            factors=[asdict(f) for f in report.health.factors],
        )
        self.db.add(snapshot)
        self.db.flush()
        return snapshot

    def get_snapshots(self, user_id: str, budget_id: str, limit: int = 20) -> List[BudgetHealthSnapshot]:
        return (
            self.db.query(BudgetHealthSnapshot)
            .filter(BudgetHealthSnapshot.user_id == user_id, BudgetHealthSnapshot.budget_id == budget_id)
            .order_by(BudgetHealthSnapshot.created_at.desc())
            .limit(limit)
            .all()
        )
