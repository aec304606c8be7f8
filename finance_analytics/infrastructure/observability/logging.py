"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finance_analytics.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured JSON logging on stdout.

    Outbound HTTP client loggers stay at WARNING so each record store call
    does not add a line next to the analytics log.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logger.level))


def log_analytics(
    request_id: str,
    user_id: str,
    kind: str,
    duration_ms: float,
    **fields: Any,
) -> None:
    """Log a completed analytics computation with its headline figures"""
    logging.info(
        "Analytics computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"{kind}_complete",
            "analytics_kind": kind,
            "duration_ms": duration_ms,
            **fields,
        },
    )
