"""Mapping from domain exceptions to HTTP errors"""

import logging
from fastapi import HTTPException

from finance_analytics.domain.exceptions import InvalidInputError, RecordNotFoundError, RecordStoreError
from finance_analytics.infrastructure.observability.metrics import record_store_failures_counter


def to_http_exception(error: Exception, request_id: str) -> HTTPException:
    """Log the failure with the request ID and choose the response status"""
    if isinstance(error, RecordNotFoundError):
        logging.warning(f"Record not found: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, RecordStoreError):
        record_store_failures_counter.inc()
        logging.error(f"Record store error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Record store unavailable")

    if isinstance(error, InvalidInputError):
        logging.warning(f"Invalid input: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(error))

    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
