"""SQLAlchemy ORM models for persisted derived analytics fields"""

import uuid
from sqlalchemy import Column, Float, DateTime, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class GoalAnalyticsSnapshot(Base):
    """Cached goal progress figures (achievement probability and friends)"""

    __tablename__ = "goal_analytics_snapshot"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    goal_id = Column(Text, nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    achievement_probability = Column(Float, nullable=False)
    progress_percentage = Column(Float, nullable=False)
    timeline_progress = Column(Float, nullable=False)
    required_monthly_contribution = Column(Float, nullable=False)
    schedule_status = Column(Text, nullable=False)
    milestones = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BudgetHealthSnapshot(Base):
    """Cached budget health score with its explaining factors"""

    __tablename__ = "budget_health_snapshot"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    budget_id = Column(Text, nullable=False, index=True)
    user_id = Column(Text, nullable=False, index=True)
    health_score = Column(Float, nullable=False)
    health_level = Column(Text, nullable=False)
    burn_rate = Column(Float, nullable=False)
    time_progress = Column(Float, nullable=False)
    factors = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
