"""
Structured logging built on structlog.

structlog events and plain stdlib records (uvicorn, libraries) go through the
same processor chain and renderer. Events are short snake_case names with
key/value context; request-scoped values bound with ``bind_request_context``
are merged into every event logged while the request is handled.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.THREAD_NAME,
            }
        ),
        structlog.processors.StackInfoRenderer(),
    ]


def _formatter(json_logs: bool, shared: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    if json_logs:
        tail: list[Processor] = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        tail = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def configure_logging(
    level: str = "INFO",
    json_logs: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Route structlog and stdlib logging through one handler setup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of the console renderer
        log_file: Optional file that additionally receives JSON lines
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(json_logs, shared))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_formatter(True, shared))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(log_level)


def get_logger(name: str, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Structured logger named ``name`` with ``initial_context`` bound to every event."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def bind_request_context(**values: Any) -> None:
    """Replace the request-scoped logging context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


class LogEvent:
    """Log event names shared across modules."""

    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"

    REQUEST_FAILED = "request_failed"

    REPORT_PLANNED = "report_planned"
    REPORT_STARTED = "report_started"
    REPORT_COMPLETED = "report_completed"
    REPORT_CANCELLED = "report_cancelled"
    REPORT_SERVED = "report_served"

    PAIR_COMPARED = "pair_compared"
    PAIR_SKIPPED = "pair_skipped"
    PAIR_BOUNDED = "pair_bounded"
    PAIR_FAILED = "pair_failed"

    TOKEN_CACHE_MISS = "token_cache_miss"
