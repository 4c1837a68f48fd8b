"""
Base repository class providing common database operations.

Model-specific repositories inherit from this class to reuse the generic,
logged and error-mapped operations below, and add their own queries on top.
`BaseRepository` enforces nothing; it is optional shared functionality.

Transactions: repository methods only flush. The caller (a service) decides
when a unit of work is committed, through `commit()`.
"""
from oriento.exceptions.base import (
    RepositoryError,
    NotFoundError,
    InvalidFieldError
)

from oriento.exceptions.mapper import db_error_handler
from oriento.validators.exception_validators import find_unknown_model_kwargs, find_missing_required

import time
from typing import TypeVar, Generic, Type, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from oriento.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. `Conversation`, not an instance)
            db: The async database session, usually injected per request
        """
        self.model = model
        self.db = db

    async def create(self, **kwargs) -> ModelType:
        """
        Validate kwargs against the model, then add + flush + refresh.

        Logging:
        - DEBUG: start event with model name and provided keys (not values).
        - INFO: rejected input (invalid fields, missing required).
        - INFO: success event with created id and duration_ms.

        Raises:
            InvalidFieldError: unknown field names.
            RepositoryError: missing required columns, or a storage failure.
            DuplicateError: unique constraint violated.
        """
        model_name = self.model.__name__
        logger.debug(
            "repo.create.start",
            extra={
                "model": model_name,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info(
                "repo.create.invalid_fields",
                extra={"model": model_name, "operation": "create", "invalid_fields": sorted(unknown)},
            )
            raise InvalidFieldError(f"Unknown field(s) for {model_name}: {', '.join(unknown)}", fields=unknown)

        missing = find_missing_required(self.model, kwargs)
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": model_name, "operation": "create", "missing_fields": sorted(missing)},
            )
            raise RepositoryError(
                f"Missing required field(s): {', '.join(missing)} for {model_name}",
                fields=missing,
                error_code="invalid_field",
            )

        start = time.perf_counter()

        async with db_error_handler(self.db, model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": model_name,
                "operation": "create",
                "id": str(getattr(entity, "id", None)),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """
        Get an entity by its primary key, or None.

        Raises:
            RepositoryError: If the query fails.
        """
        try:
            entity = await self.db.get(self.model, entity_id)
        except Exception as e:
            logger.error(f"Error retrieving {self.model.__name__} by ID {entity_id}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__}") from e

        logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id} (found={entity is not None})")
        return entity

    async def get_by_id_or_raise(self, entity_id: Any) -> ModelType:
        """
        Get an entity by its ID or raise NotFoundError.
        """
        entity = await self.get_by_id(entity_id)

        if entity is None:
            raise NotFoundError(f"{self.model.__name__} with ID {entity_id} not found")

        return entity

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Find a single entity by any mapped field.

        Raises:
            InvalidFieldError: If the field does not exist on the model.
            RepositoryError: If the query fails.
        """
        if not hasattr(self.model, field):
            raise InvalidFieldError(f"{self.model.__name__} has no field '{field}'", fields=[field])

        try:
            result = await self.db.execute(
                select(self.model).where(getattr(self.model, field) == value)
            )
            entity = result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error finding {self.model.__name__} by {field}: {e}")
            raise RepositoryError(f"Failed to find {self.model.__name__}") from e

        logger.debug(f"Found {self.model.__name__} by {field} (found={entity is not None})")
        return entity

    async def count(self, **filters: Any) -> int:
        """
        Count entities, optionally filtered by equality on mapped fields
        (e.g. `count(user_id=some_id)`).
        """
        try:
            query = select(func.count()).select_from(self.model)
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)

            result = await self.db.execute(query)
            count = result.scalar() or 0
        except Exception as e:
            logger.error(f"Error counting {self.model.__name__}: {e}")
            raise RepositoryError(f"Failed to count {self.model.__name__} entities") from e

        logger.debug(f"Counted {count} {self.model.__name__} entities")
        return count

    async def commit(self) -> None:
        """
        Commit the current unit of work. Rolls back and raises an app-level
        error on failure.
        """
        async with db_error_handler(self.db, self.model.__name__):
            await self.db.commit()
        logger.debug("repo.commit.success", extra={"model": self.model.__name__})
