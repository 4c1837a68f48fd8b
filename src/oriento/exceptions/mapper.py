"""
Translate SQLAlchemy failures into app-level exceptions.

Repositories wrap their writes in `db_error_handler`; callers only ever see
`DuplicateError` / `RepositoryError`, never raw driver errors or DB messages.
"""
import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import AppError, DuplicateError, RepositoryError

logger = logging.getLogger(__name__)

# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_UNIQUE_VIOLATION = "23505"

_UNIQUE_KEYWORDS = ("unique constraint", "unique failed", "unique violation", "duplicate")


# -----------------------
# Classification helpers
# -----------------------

def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when the IntegrityError is a unique/primary-key violation.

    Prefers the Postgres SQLSTATE (psycopg exposes `sqlstate`, older drivers
    `pgcode`) and falls back to message keywords for SQLite.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == PG_UNIQUE_VIOLATION

    msg = str(orig if orig is not None else exc).lower()
    return any(keyword in msg for keyword in _UNIQUE_KEYWORDS)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the offending column names:
      - Postgres: 'DETAIL:  Key (email)=(a@b.com) already exists.'
      - SQLite:   'UNIQUE constraint failed: users.email'
    """
    msg = str(exc.orig if exc.orig is not None else exc)

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = re.search(r'UNIQUE constraint failed: (?P<cols>[^\n]+)', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols").strip())]

    return None


def _constraint_name(exc: IntegrityError) -> str | None:
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None) if diag else None


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to an app-level exception and raise it.
    """
    model_part = model_name or "Record"
    constraint = _constraint_name(exc)

    if is_unique_violation(exc):
        columns = extract_columns_from_integrity(exc)
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_part, "fields": columns, "constraint": constraint},
        )
        if columns:
            raise DuplicateError(
                f"{model_part} already exists for field(s): {', '.join(columns)}",
                fields=columns, constraint=constraint,
            ) from exc
        raise DuplicateError(f"{model_part} already exists", constraint=constraint) from exc

    # Raw DB text stays at DEBUG; clients get a generic message.
    logger.warning("mapper.integrity_error", extra={"model": model_part, "constraint": constraint})
    logger.debug("mapper.integrity_error_raw", extra={"model": model_part, "raw": str(exc.orig)})
    raise RepositoryError(f"{model_part} database integrity error.", constraint=constraint) from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("Failed to rollback session", extra={"model": model_name})


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise ...

    Rolls back on any error. App-level errors raised inside the block are
    re-raised untouched; everything else is mapped.
    """
    try:
        yield
    except AppError:
        await _safe_rollback(db, model_name)
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
