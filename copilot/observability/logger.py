"""
Logger configuration.

Installs a single stdout handler on the root logger and lowers the
verbosity of chatty client libraries.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "google", "urllib3")

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the service.

    Existing root handlers are replaced so repeated calls do not
    duplicate output.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
