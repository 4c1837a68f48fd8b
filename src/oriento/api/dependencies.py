"""
Request-scoped dependencies: caller identity and the Oriento service.
"""
import logging
import uuid

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from oriento.database.session import get_async_session
from oriento.exceptions.base import UnauthenticatedError
from oriento.models.user import User
from oriento.repositories.conversation_repository import ConversationRepository
from oriento.repositories.user_repository import UserRepository
from oriento.services.oriento_service import OrientoService

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-ID"),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Resolve the caller from the `X-User-ID` header set by the auth gateway.

    Raises:
        UnauthenticatedError: header missing or malformed, or no active user with that id.
    """
    if not x_user_id:
        raise UnauthenticatedError("Missing X-User-ID header")

    try:
        user_id = uuid.UUID(x_user_id.strip())
    except ValueError:
        logger.info("auth.malformed_user_id")
        raise UnauthenticatedError("Malformed X-User-ID header") from None

    user = await UserRepository(db).get_active_user(user_id)
    if user is None:
        logger.info("auth.unknown_user", extra={"user_id": str(user_id)})
        raise UnauthenticatedError("Unknown or inactive user")

    return user


async def get_oriento_service(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
) -> OrientoService:
    state = request.app.state
    return OrientoService(
        conversations=ConversationRepository(db),
        sessions=state.chat_sessions,
        provider=state.chat_provider,
        model_name=state.model_name,
        chat_config=state.chat_config,
    )
