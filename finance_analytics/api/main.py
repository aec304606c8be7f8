"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_analytics.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_analytics.api.v1 import budgets, goals, reports
from finance_analytics.infrastructure.observability.logging import setup_logging
from finance_analytics.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Analytics",
        description="Budget, goal, income, cash flow and net worth analytics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
