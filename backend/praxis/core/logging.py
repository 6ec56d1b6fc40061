"""Process-wide logging setup for the API and the scheduler worker."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from praxis.core.context import client_session_ctx_var, get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(client_session)s | %(message)s"
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "apscheduler.executors", "opik")

_configured = False


class RequestContextFilter(logging.Filter):
    """Stamp every record with the request id and client session of the active request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.client_session = client_session_ctx_var.get() or "-"
        return True


def configure_logging(*, log_level: str = "INFO") -> None:
    """Install console logging once; later calls are ignored."""
    global _configured
    if _configured:
        return

    level = log_level.upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"praxis": {"format": LOG_FORMAT}},
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "praxis",
                    "level": level,
                    "filters": ["request_context"],
                }
            },
            "loggers": {
                **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
                "praxis": {"level": level},
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )

    _configured = True
    logging.getLogger(__name__).debug("Logging configured at %s", level)
