"""Logging for the storefront.

stdlib logging carries the output (stdout, plus a rotating file when
``STOREFRONT_LOG_DIR`` is set); structlog formats it. Every line written
while a request is being served carries that request's context (request id,
method, path and, once authenticated, the caller's user id).
"""

import logging
import logging.handlers
import os
import sys
from typing import Any

import structlog

SERVICE_NAME = "storefront"

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Noisy libraries that only matter when something is already wrong
_QUIET_LOGGERS = ("protean", "uvicorn.access", "asyncio")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(_environment(), "INFO"))


def setup_stdlib_logging() -> None:
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []
    root_logger.addHandler(logging.StreamHandler(sys.stdout))

    log_dir = os.getenv("STOREFRONT_LOG_DIR")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        root_logger.addHandler(
            logging.handlers.RotatingFileHandler(
                filename=os.path.join(log_dir, f"{SERVICE_NAME}.log"),
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_structlog() -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if _environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def start_request_context(request_id: str, method: str, path: str) -> None:
    """Forget the previous request's context and start a new one."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def bind_request_context(**kwargs: Any) -> None:
    """Attach values (such as the caller's user id) to the rest of this request's log lines."""
    structlog.contextvars.bind_contextvars(**kwargs)
