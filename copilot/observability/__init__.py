"""
Observability module.

Provides logging configuration, structured logging helpers and HTTP
request logging.
"""

from copilot.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from copilot.observability.logger import configure_logging
from copilot.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
