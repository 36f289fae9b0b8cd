"""
Exception to HTTP status mapping shared by the routers.

Dependencies: fastapi, copilot.core.exceptions
System role: Error translation for the HTTP API
"""

import logging

from fastapi import HTTPException

from copilot.core.exceptions import (
    CopilotException,
    ItemConflictError,
    MalformedUpstreamDataError,
    NotFoundError,
    PartitionMismatchError,
    ProviderUnavailableError,
    ValidationError,
)
from copilot.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION: list[tuple[type[CopilotException], int]] = [
    (NotFoundError, 404),
    (ItemConflictError, 409),
    (ValidationError, 422),
    (PartitionMismatchError, 400),
    (MalformedUpstreamDataError, 502),
    (ProviderUnavailableError, 503),
]


def to_http_exception(exc: CopilotException, operation: str) -> HTTPException:
    """
    Translate an application exception to an HTTPException.

    Unmapped application errors become 500 and are logged with context.

    Args:
        exc: Exception raised by a service
        operation: Endpoint name used in logs

    Returns:
        HTTPException: Exception to raise from the endpoint
    """
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            if status_code >= 500:
                log_exception_with_context(logger, f"{__name__}:{operation} - Upstream failure", exc)
            headers = {"Retry-After": "1"} if exc.retryable else None
            return HTTPException(status_code=status_code, detail=exc.message, headers=headers)

    log_exception_with_context(logger, f"{__name__}:{operation} - Unexpected application error", exc)
    return HTTPException(status_code=500, detail=f"{operation} failed: {exc.message}")
