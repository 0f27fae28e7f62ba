"""
Structured JSON logging configuration.

This module sets up JSON logging with consistent field names for
data-access events:
- Timestamp, level, message, logger
- Target database and collection
- Repository operation name and its affected count
- Latency of the driver round trip

Logs are output to stdout in JSON format for easy parsing by
log aggregation systems.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from blogdb.core.config import Settings, get_settings


# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
})

CONTEXT_FIELDS = (
    "database",
    "collection",
    "operation",
    "field",
    "count",
    "user_id",
    "latency_ms",
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as single-line JSON objects with consistent fields:
    - timestamp: ISO 8601 UTC timestamp
    - level: Log level name
    - message: Log message
    - logger: Logger name (module path)
    - database / collection: MongoDB namespace (if available)
    - operation: Repository operation name (if available)
    - field: Field name used in a filter or update (if available)
    - count: Documents returned or affected (if available)
    - user_id: Target document id (if available)
    - latency_ms: Driver round trip in milliseconds (if available)
    - exception: Formatted traceback (if exception occurred)

    Example output:
        {"timestamp": "2026-10-19T10:30:00.123456+00:00", "level": "INFO",
         "message": "Deleted users", "logger": "blogdb.repositories.users",
         "collection": "users", "operation": "delete_all_users", "count": 2}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        # Remaining custom fields passed via extra={...}
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        # ObjectId and friends fall back to str()
        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True
) -> None:
    """
    Configure root logging.

    Replaces existing root handlers with a single stdout handler and
    quiets the driver's own loggers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter (True) or simple formatter (False)

    Example:
        setup_logging(level="DEBUG", json_format=False)
    """
    root_logger = logging.getLogger()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy driver loggers
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("motor").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from LOG_LEVEL and LOG_JSON.

    Call once at process startup, before creating repositories.

    Example:
        configure_logging()
        repo = UsersRepository.from_connection_string(get_settings().mongodb_url)
    """
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance with given name."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **fields: Any
) -> None:
    """
    Log message with structured context fields.

    Fields whose value is None are dropped so they don't show up as
    nulls in the JSON output.

    Example:
        log_with_context(
            logger,
            "info",
            "Inserted user",
            collection="users",
            operation="insert_user",
            user_id=user.id,
        )
    """
    extra = {key: value for key, value in fields.items() if value is not None}
    getattr(logger, level.lower())(message, extra=extra)


def redact_connection_string(url: str) -> str:
    """
    Strip the password from a connection string before it is logged.

    Example:
        >>> redact_connection_string("mongodb://admin:s3cret@db:27017/")
        'mongodb://admin:***@db:27017/'
    """
    parts = urlsplit(url)
    if "@" not in parts.netloc:
        return url

    credentials, hosts = parts.netloc.rsplit("@", 1)
    if ":" not in credentials:
        # Username only, nothing to hide
        return url

    username = credentials.split(":", 1)[0]
    netloc = f"{username}:***@{hosts}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))
