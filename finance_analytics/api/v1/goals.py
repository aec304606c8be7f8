"""Goal analytics endpoints - progress, probability, milestones and history"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_analytics.api.dependencies import get_as_of, get_record_store_client, get_request_id
from finance_analytics.api.errors import to_http_exception
from finance_analytics.api.v1.schemas import GoalHistoryResponse, GoalProgressResponse, GoalSnapshotItem
from finance_analytics.config import settings
from finance_analytics.domain import goals
from finance_analytics.domain.exceptions import DomainException
from finance_analytics.infrastructure.clients.record_store import RecordStoreClient
from finance_analytics.infrastructure.database.repositories import GoalSnapshotRepository
from finance_analytics.infrastructure.database.session import get_db
from finance_analytics.infrastructure.observability.logging import log_analytics
from finance_analytics.infrastructure.observability.metrics import record_goal_probability

router = APIRouter()


@router.get("/goals/{goal_id}/progress", response_model=GoalProgressResponse)
async def get_goal_progress(
    goal_id: str,
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    as_of: date = Depends(get_as_of),
    db: Session = Depends(get_db),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """
    Compute a goal's progress and cache its achievement probability.

    Flow:
    1. Fetch the goal with its contribution history
    2. Compute metrics, probability, milestones and completion forecast
    3. Persist the derived fields as a snapshot
    4. Return the progress response
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        goal = await record_store.get_goal(user_id, goal_id)

        progress = goals.metrics(goal, as_of)
        probability = goals.achievement_probability(goal, as_of, progress)
        checkpoints = goals.milestones(goal)

        GoalSnapshotRepository(db).create_snapshot(
            user_id=user_id,
            goal_id=goal_id,
            probability=probability,
            progress=progress,
            milestones=checkpoints,
        )
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_goal_probability(probability)
        log_analytics(
            request_id,
            user_id,
            "goal_progress",
            duration_ms,
            goal_id=goal_id,
            achievement_probability=probability,
            progress_percentage=progress.progress_percentage,
        )

        return GoalProgressResponse(
            goal_id=goal.goal_id,
            name=goal.name,
            as_of=as_of,
            metrics=progress,
            achievement_probability=probability,
            milestones=list(checkpoints),
            forecast=goals.predict_completion(goal, as_of),
            contribution_trends=goals.contribution_trends(goal),
        )

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.exception("Goal progress failed", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/goals/{goal_id}/history", response_model=GoalHistoryResponse)
def get_goal_history(
    goal_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Retrieve cached achievement probabilities for a goal.

    Returns:
        Snapshots newest first, capped at the configured history limit
    """
    snapshots = GoalSnapshotRepository(db).get_snapshots(user_id, goal_id, limit=settings.snapshot_history_limit)

    history_items = [
        GoalSnapshotItem(
            snapshot_id=str(s.id),
            achievement_probability=s.achievement_probability,
            progress_percentage=s.progress_percentage,
            timeline_progress=s.timeline_progress,
            schedule_status=s.schedule_status,
            created_at=s.created_at.isoformat(),
        )
        for s in snapshots
    ]

    return GoalHistoryResponse(user_id=user_id, goal_id=goal_id, snapshots=history_items)
