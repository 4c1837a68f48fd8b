"""
Conversation repository: persistence for conversation ownership records.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from oriento.models.conversation import Conversation
from oriento.models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConversationRepository(BaseRepository[Conversation]):
    """
    Repository for Conversation entity operations.

    Exposes only what the Oriento service needs: save a new record and look
    one up by id. Ownership is checked by the caller through
    `Conversation.belongs_to`, so a lookup by id never filters on the owner;
    that is what lets the service tell "unknown id" apart from "someone else's id".
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    async def save_new(self, conversation_id: str, owner: User) -> Conversation:
        """
        Persist a new conversation owned by `owner`.

        Args:
            conversation_id: Freshly generated, globally unique id.
            owner: The authenticated caller.

        Raises:
            DuplicateError: If the id already exists.
            RepositoryError: For storage failures.
        """
        logger.info(
            "conversation.create",
            extra={"conversation_id": conversation_id, "user_id": str(owner.id)},
        )
        return await self.create(id=conversation_id, user_id=owner.id)

    async def find_by_id(self, conversation_id: str) -> Conversation | None:
        """
        Look up a conversation by id, regardless of owner.
        """
        return await self.get_by_id(conversation_id)

    async def count_user_conversations(self, user_id: UUID) -> int:
        return await self.count(user_id=user_id)
