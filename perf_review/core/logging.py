"""
JSON logging for the API process.

Every record is a single JSON object with `timestamp`, `level`, `name`,
`message`, the service/environment it came from and, inside a request,
the correlation id set by CorrelationIdMiddleware. Extra fields passed via
`logger.info(..., extra={...})` (review_id, error_code, ...) are kept as
top-level keys.
"""
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pythonjsonlogger import jsonlogger

from perf_review.core.config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_FORMAT = "%(timestamp) %(level) %(name) %(message)"

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,  # LoggingMiddleware writes the access log
    "passlib": logging.ERROR,
}


class ReviewJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record.setdefault("service", settings.app_name)
        log_record.setdefault("environment", settings.environment)

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install the JSON handler on the root logger. Safe to call twice."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, ReviewJsonFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(ReviewJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level or settings.log_level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.sql_echo else logging.WARNING)
