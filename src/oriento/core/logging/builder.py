"""
Logging builder: build and apply a dictConfig from Settings, and optionally move
log IO to a background thread (LOG_USE_QUEUE).

Queue mode:
 - producers only enqueue records through a QueueHandler on the root logger;
 - a QueueListener runs the real handlers (console / files) in its own thread;
 - RequestIdFilter and RedactFilter run on the QueueHandler, i.e. in the
   producing context, where the request-id contextvar is visible and before any
   secret reaches the queue;
 - with LOG_QUEUE_MAX_SIZE > 0 the queue is bounded and full-queue records are
   dropped (counted in `get_queue_stats()`), never blocking a request.

Call `stop_queue_logging()` at shutdown to flush and stop the listener.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import queue as _queue
import threading
from logging.handlers import QueueHandler, QueueListener

from oriento.config.settings import Settings
from oriento.utils.logging import get_project_name
from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

DEFAULT_SERVICE_NAME = "oriento-api"

_QUEUE_LISTENER: QueueListener | None = None
_QUEUE: _queue.Queue | None = None

_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler that drops (and counts) records instead of blocking when a
    bounded queue is full.
    """

    def enqueue(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(record)
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1


def get_queue_stats() -> dict:
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping.

    Handlers: "console" always; "file" + "error_file" when LOG_TO_STDOUT is off
    and LOG_DIR is set, otherwise "error_console".
    Loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine, google_genai, httpx.
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default=DEFAULT_SERVICE_NAME),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    # Third-party HTTP clients log full URLs and headers at DEBUG.
    quiet_level = "WARNING" if settings.LOG_LEVEL == "DEBUG" else settings.LOG_LEVEL

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            # SQL logging may contain user data
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "google_genai": {"level": quiet_level},
            "httpx": {"level": quiet_level},
            "httpcore": {"level": "WARNING"},
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the dictConfig and, when LOG_USE_QUEUE is set, rewire the root
    logger's handlers behind a QueueListener.
    """
    global _QUEUE_LISTENER, _QUEUE

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    # A previous queue setup (tests, reload) must not keep a listener thread alive.
    stop_queue_logging()

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())

    if not settings.LOG_USE_QUEUE:
        return

    root_logger = logging.getLogger()
    current_handlers = list(root_logger.handlers)
    if not current_handlers:
        return

    # Detach the real handlers everywhere so they only run in the listener thread.
    handlers_to_move = set(current_handlers)
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            for h in list(logger_obj.handlers):
                if h in handlers_to_move:
                    logger_obj.removeHandler(h)
    for h in list(root_logger.handlers):
        if h in handlers_to_move:
            root_logger.removeHandler(h)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size) if max_size > 0 else _queue.Queue()
    queue_handler_cls = NonBlockingQueueHandler if max_size > 0 else QueueHandler

    listener = QueueListener(log_queue, *current_handlers, respect_handler_level=True)
    listener.start()

    qh = queue_handler_cls(log_queue)
    qh.addFilter(RequestIdFilter())
    qh.addFilter(RedactFilter())
    root_logger.addHandler(qh)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def stop_queue_logging() -> None:
    """
    Flush and stop the QueueListener, if one is running. Safe to call repeatedly.
    """
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None
