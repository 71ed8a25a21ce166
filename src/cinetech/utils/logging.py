# COMPONENT: CENTRALIZED LOGGING CONFIGURATION
# REQUIREMENTS SATISFIED: catalog-wide logger, environment-controlled verbosity, request correlation
"""
src/cinetech/utils/logging.py

Configures the single "cinetech" logger shared by the catalog services,
the OMDb client and the HTTP layer.

Environment Variables:
    LOG_LEVEL:
        0 → Silent (no logs emitted)
        1 → INFO  (mutations, imports, one line per HTTP exchange)
        2 → DEBUG (adds request and response bodies)

    LOG_FILE:
        Optional path to a log file. If it cannot be opened, logs go to
        standard error instead.

Request correlation:
    The request-logging middleware stores a short id for each HTTP
    exchange in `request_id_var`. A filter copies it onto every record so
    that a film mutation logged by the store and the access line written
    by the middleware carry the same id. Records emitted outside a
    request (startup, tests) show "-".

    2024-05-01 12:00:00,000 INFO [3f2a9c1e] Film created: id=6 title=Heat
"""
import os
import sys
import logging
from contextvars import ContextVar

LOGGER_NAME = "cinetech"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(message)s"

request_id_var: ContextVar[str] = ContextVar("cinetech_request_id", default="-")

_LEVELS = {1: logging.INFO, 2: logging.DEBUG}
SILENT = logging.CRITICAL + 1


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def _verbosity() -> int:
    try:
        return max(0, int(os.environ.get("LOG_LEVEL", "0")))
    except ValueError:
        return 0


def _handler(log_file):
    if log_file:
        try:
            return logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError:
            pass
    return logging.StreamHandler(sys.stderr)


def setup_logger():
    """
    (Re)configure the catalog logger from LOG_LEVEL / LOG_FILE. Safe to
    call repeatedly; previous handlers are dropped.
    """
    verbosity = _verbosity()

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    logger.handlers.clear()
    logger.filters.clear()

    if verbosity == 0:
        logger.setLevel(SILENT)
        return logger

    logger.setLevel(_LEVELS.get(verbosity, logging.DEBUG))
    handler = _handler(os.environ.get("LOG_FILE"))
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


logger = setup_logger()
