"""Structured logging configuration"""

import logging
import os
import sys
from typing import Optional
import structlog
from pythonjsonlogger import jsonlogger


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    service_name: str = "recommendations"
) -> None:
    """
    Configure structured logging

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for production, "text" for a console renderer
        log_file: Optional file that receives a copy of every log line
        service_name: Value of the ``service`` field on every event
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    file_error = None
    if log_file:
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            # Stdout only
            file_error = e

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=handlers,
        force=True
    )

    def add_service(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    if log_format == "text":
        renderers = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_service,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderers
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False
    )

    if file_error is not None:
        get_logger(__name__).warning("Cannot open log file", log_file=log_file, error=str(file_error))


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


# JSON formatter for standard logging
class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def __init__(self, *args, service_name: str = "recommendations", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['service'] = self.service_name
        log_record['level'] = record.levelname.lower()
        log_record['logger_name'] = record.name

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


def configure_uvicorn_logging(service_name: str = "recommendations") -> None:
    """Configure Uvicorn logging to use JSON format"""

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_error = logging.getLogger("uvicorn.error")

    formatter = CustomJsonFormatter(
        '%(timestamp)s %(level)s %(name)s %(message)s',
        timestamp=True,
        service_name=service_name
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    uvicorn_access.handlers = [handler]
    uvicorn_error.handlers = [handler]
    uvicorn_access.propagate = False
    uvicorn_error.propagate = False
