"""
Structured logging for audit runs

JSON lines for machines, a compact text line for terminals. Both go to
stderr so stdout stays free for CLI results. Loggers carry their domain
(d0, d3, ...) and, inside an audit, the audit id and analyzer name.
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from core.config import settings

# Context keys promoted into every record, blank when a logger does not set them
CONTEXT_FIELDS = ("domain", "audit_id", "analyzer")


class AuditContextFilter(logging.Filter):
    """Give every record the audit context attributes the formatters expect"""

    def filter(self, record: logging.LogRecord) -> bool:
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "")
        return True


class AuditJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps app, environment and UTC time on each line"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["app"] = settings.app_name
        log_record["environment"] = settings.environment
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["msg"] = record.getMessage()

        # Unset context is noise in JSON
        for name in CONTEXT_FIELDS:
            if not log_record.get(name):
                log_record.pop(name, None)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        log_record.pop("message", None)


class AuditTextFormatter(logging.Formatter):
    """One line per record, with [domain audit_id] when known"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s%(context)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        parts = [str(getattr(record, name, "")) for name in ("domain", "audit_id") if getattr(record, name, "")]
        record.context = f" [{' '.join(parts)}]" if parts else ""
        return super().format(record)


def build_handler(log_format: Optional[str] = None, stream=None) -> logging.Handler:
    """Stream handler with the configured formatter and the context filter attached"""
    handler = logging.StreamHandler(stream or sys.stderr)
    if (log_format or settings.log_format) == "json":
        handler.setFormatter(AuditJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(AuditTextFormatter())
    handler.addFilter(AuditContextFilter())
    return handler


def setup_logging() -> None:
    """Configure the root logger from settings"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(build_handler())

    logging.getLogger("asyncio").setLevel(logging.WARNING)


class LoggerAdapter(logging.LoggerAdapter):
    """Adds bound context to every message; per-call extra wins on conflicts"""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def with_context(self, **context) -> "LoggerAdapter":
        """Same logger with more bound context, e.g. audit_id for one run"""
        return LoggerAdapter(self.logger, {**self.extra, **context})


def get_logger(name: str, **context) -> LoggerAdapter:
    """
    Get a logger with bound context

    Args:
        name: Logger name (usually __name__)
        **context: Fields added to every record, typically domain="d3"

    Example:
        logger = get_logger(__name__, domain="d3")
        logger.with_context(audit_id=record.id).info("Audit started")
    """
    return LoggerAdapter(logging.getLogger(name), context)


# Initialize logging on import
setup_logging()
