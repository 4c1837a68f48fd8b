"""
Map `AppError` subclasses to HTTP responses.

Status and payload come from the exception itself (`http_status()`,
`to_payload()`), so one handler covers the whole taxonomy.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from oriento.exceptions.base import AppError, UpstreamFailureError

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status = exc.http_status()
    extra = {
        "method": request.method,
        "path": request.url.path,
        "status_code": status,
        "error_code": exc.error_code,
        "fields": exc.fields,
    }

    if isinstance(exc, UpstreamFailureError):
        logger.warning("http.upstream_failure", extra={**extra, "provider": exc.provider})
    elif exc.is_server_error:
        # constraint names stay in the logs, never in the payload
        logger.error("http.server_error", extra={**extra, "constraint": exc.constraint, "error": str(exc)})
    else:
        logger.info("http.client_error", extra=extra)

    return JSONResponse(status_code=status, content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
