"""
Application-level exceptions.

Every error the service layer lets escape is an `AppError` subclass carrying a
canonical `error_code`. The code decides the HTTP status (see
`AppError.ERROR_CODE_TO_STATUS`) and is echoed to clients in the payload, so API
handlers stay tiny and never inspect exception types themselves.

Client errors:   NotFoundError, PermissionDeniedError, UnauthenticatedError,
                 InvalidFieldError, DuplicateError
Server errors:   RepositoryError (storage failure), UpstreamFailureError
"""

from typing import Iterable


class AppError(Exception):
    """
    Base exception for service/repository errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['conversationId'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'not_found', 'permission_denied') used by clients
    """

    ERROR_CODE_TO_STATUS = {
        "not_found": 404,
        "permission_denied": 403,
        "unauthenticated": 401,
        "duplicate": 409,
        "invalid_field": 422,
        "storage_failure": 500,
        "upstream_failure": 502,
    }

    # status used when the error carries no (or an unmapped) code
    DEFAULT_STATUS = 400

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses:

            {
                "detail": "A human-friendly message",
                "code": "not_found",           # optional canonical code
                "fields": ["conversationId"],  # optional
            }

        `constraint` is never included; it may name DB internals.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, self.DEFAULT_STATUS)
        return self.DEFAULT_STATUS

    @property
    def is_server_error(self) -> bool:
        return self.http_status() >= 500


# -------------------------------
# Client errors
# -------------------------------

class NotFoundError(AppError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class PermissionDeniedError(AppError):
    """The caller is authenticated but does not own the requested resource."""

    def __init__(self, message: str = "Permission denied", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="permission_denied")


class UnauthenticatedError(AppError):
    """No usable caller identity was supplied with the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, error_code="unauthenticated")


class InvalidFieldError(AppError):
    """Raised when the caller passes unexpected/unknown fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


# -------------------------------
# Storage errors
# -------------------------------

class RepositoryError(AppError):
    """
    Persistence read/write failed (StorageFailure).

    Subclasses override the code when the failure is the client's fault
    (e.g. DuplicateError -> 409).
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = "storage_failure"):
        super().__init__(message, fields=fields, constraint=constraint, error_code=error_code)


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


# -------------------------------
# Provider errors
# -------------------------------

class UpstreamFailureError(AppError):
    """
    The generative-model provider failed (timeout, quota, transport error) or
    returned a response with no usable text. Never retried locally.
    """

    def __init__(self, message: str = "The language model provider failed to answer",
                 *, provider: str | None = None):
        super().__init__(message, error_code="upstream_failure")
        self.provider = provider


__all__ = [
    "AppError",
    "NotFoundError",
    "PermissionDeniedError",
    "UnauthenticatedError",
    "InvalidFieldError",
    "RepositoryError",
    "DuplicateError",
    "UpstreamFailureError",
]
