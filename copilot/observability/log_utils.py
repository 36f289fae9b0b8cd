"""
Structured logging helpers.

Values passed as log context are reduced to short, safe strings so
that user text (prompts, completions) never floods the logs.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

# LogRecord attributes that may not be overwritten through extra=
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a value for log context.

    Collections are summarised by size and long strings are truncated.

    Args:
        value: Value to render
        max_length: Maximum characters kept from the string form

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    text = value if isinstance(value, str) else str(value)
    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def _context(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RESERVED else key): safe_log_value(value)
        for key, value in context.items()
    }


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log message at level with context values made log-safe."""
    logger.log(level, message, extra=_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with its traceback and log-safe context.

    Application exceptions contribute their details dict.
    """
    safe = _context(context)
    safe["error_type"] = type(exc).__name__
    safe["error_msg"] = safe_log_value(str(exc))
    details = getattr(exc, "details", None)
    if details:
        safe["error_details"] = safe_log_value(details)
    logger.error(message, exc_info=exc, extra=safe)
