# oriento/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py      # App-level errors (NotFoundError, PermissionDeniedError, UpstreamFailureError, ...)
# │   └── mapper.py    # Map SQLAlchemy / driver errors to app-level errors

from .base import (
    AppError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    InvalidFieldError,
    RepositoryError,
    DuplicateError,
    UpstreamFailureError,
)

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
