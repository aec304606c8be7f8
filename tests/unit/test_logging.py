"""Unit tests for structured logging setup"""

import json
import logging
from finance_analytics.infrastructure.observability.logging import CustomJsonFormatter, setup_logging


def test_setup_logging_quiets_http_client_loggers():
    setup_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_json_formatter_adds_service_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("finance", logging.INFO, __file__, 1, "Analytics computed", None, None)
    record.analytics_kind = "income"

    payload = json.loads(formatter.format(record))

    assert payload["level"] == "INFO"
    assert payload["service"] == "finance-analytics"
    assert payload["analytics_kind"] == "income"
    assert payload["message"] == "Analytics computed"
