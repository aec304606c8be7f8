"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional
from fastapi import Query, Request
from finance_analytics.infrastructure.clients.record_store import RecordStoreClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_record_store_client() -> RecordStoreClient:
    """Provide record store client instance"""
    return RecordStoreClient()


def get_as_of(as_of: Optional[date] = Query(None, description="Evaluation date, defaults to today")) -> date:
    """Resolve the evaluation date; the engine itself never reads the clock"""
    return as_of or date.today()
