"""
Logging filters.

- RequestIdFilter stamps every record with the request id of the current
  async context (set by RequestIDMiddleware), or "-" outside a request.
- RedactFilter masks record attributes whose names look sensitive. Prompts and
  model responses are not masked; they are only ever logged at DEBUG.
"""

import logging
from logging import LogRecord
import contextvars

# Request id of the current execution context (async task / logical flow).
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id() to restore the previous value.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantees every LogRecord has a `request_id` attribute.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar,
    then the "-" sentinel (keeps %(request_id)s format strings safe).
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    REDACTED = "***REDACTED***"

    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "api_key",
        "gemini_api_key",
        "x-api-key",
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.REDACTED
        return True
