"""Budget analytics endpoints - performance report and health history"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_analytics.api.dependencies import get_as_of, get_record_store_client, get_request_id
from finance_analytics.api.errors import to_http_exception
from finance_analytics.api.v1.schemas import BudgetHistoryResponse, BudgetSnapshotItem
from finance_analytics.config import settings
from finance_analytics.domain.budgets import evaluate
from finance_analytics.domain.exceptions import DomainException
from finance_analytics.domain.models import PerformanceReport
from finance_analytics.infrastructure.clients.record_store import RecordStoreClient
from finance_analytics.infrastructure.database.repositories import BudgetSnapshotRepository
from finance_analytics.infrastructure.database.session import get_db
from finance_analytics.infrastructure.observability.logging import log_analytics
from finance_analytics.infrastructure.observability.metrics import record_budget_health

router = APIRouter()


@router.get("/budgets/{budget_id}/performance", response_model=PerformanceReport)
async def get_budget_performance(
    budget_id: str,
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    as_of: date = Depends(get_as_of),
    db: Session = Depends(get_db),
    record_store: RecordStoreClient = Depends(get_record_store_client),
):
    """
    Evaluate a budget's performance.

    Flow:
    1. Fetch the budget with its category allocations
    2. Compute utilization, pacing, health score and violations
    3. Persist the health score snapshot
    4. Return the performance report
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        budget = await record_store.get_budget(user_id, budget_id)
        report = evaluate(budget, as_of)

        BudgetSnapshotRepository(db).create_snapshot(user_id, report)
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_budget_health(report.health.score)
        log_analytics(
            request_id,
            user_id,
            "budget_performance",
            duration_ms,
            budget_id=budget_id,
            health_score=report.health.score,
            violations=len(report.violations),
        )
        return report

    except DomainException as e:
        db.rollback()
        raise to_http_exception(e, request_id)

    except Exception as e:
        db.rollback()
        logging.exception("Budget performance failed", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/budgets/{budget_id}/history", response_model=BudgetHistoryResponse)
def get_budget_history(
    budget_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Recent health snapshots for a budget, newest first"""
    snapshots = BudgetSnapshotRepository(db).get_snapshots(user_id, budget_id, limit=settings.snapshot_history_limit)

    return BudgetHistoryResponse(
        user_id=user_id,
        budget_id=budget_id,
        snapshots=[
            BudgetSnapshotItem(
                snapshot_id=str(s.id),
                health_score=s.health_score,
                health_level=s.health_level,
                burn_rate=s.burn_rate,
                created_at=s.created_at.isoformat(),
            )
            for s in snapshots
        ],
    )
