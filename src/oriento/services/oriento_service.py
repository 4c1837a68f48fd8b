"""
Oriento service: binds each conversation to its owner and to one provider chat session.
"""
import logging
import time
import uuid

from oriento.exceptions.base import NotFoundError, PermissionDeniedError
from oriento.models.conversation import Conversation
from oriento.models.user import User
from oriento.providers.base import ChatConfig, ChatProvider, ChatSession
from oriento.repositories.conversation_repository import ConversationRepository
from oriento.schemas.ask import AskResponse
from .chat_sessions import ChatSessionRegistry

logger = logging.getLogger(__name__)


class OrientoService:
    """
    Per-request service. The registry and provider are app-lifetime objects;
    the repository is bound to the request's database session.
    """

    def __init__(
        self,
        conversations: ConversationRepository,
        sessions: ChatSessionRegistry,
        provider: ChatProvider,
        model_name: str,
        chat_config: ChatConfig,
    ):
        self.conversations = conversations
        self.sessions = sessions
        self.provider = provider
        self.model_name = model_name
        self.chat_config = chat_config

    async def resolve_conversation(self, conversation_id: str | None, caller: User) -> Conversation:
        """
        Return the caller's conversation, creating it when no id is given.

        A blank or whitespace-only id counts as "no id".

        Raises:
            NotFoundError: the id is unknown.
            PermissionDeniedError: the conversation belongs to another user.
            RepositoryError: storage failure.
        """
        conversation_id = (conversation_id or "").strip()

        if not conversation_id:
            new_id = str(uuid.uuid4())
            conversation = await self.conversations.save_new(new_id, caller)
            await self.conversations.commit()
            logger.debug(
                "oriento.conversation.created",
                extra={"conversation_id": new_id, "user_id": str(caller.id)},
            )
            return conversation

        conversation = await self.conversations.find_by_id(conversation_id)
        if conversation is None:
            logger.info("oriento.conversation.not_found", extra={"conversation_id": conversation_id})
            raise NotFoundError(
                f"Conversation {conversation_id} not found",
                fields=["conversationId"],
            )

        if not conversation.belongs_to(caller):
            logger.warning(
                "oriento.conversation.access_denied",
                extra={"conversation_id": conversation_id, "user_id": str(caller.id)},
            )
            raise PermissionDeniedError(
                "This conversation does not belong to the current user",
                fields=["conversationId"],
            )

        return conversation

    def get_or_create_chat_session(self, conversation_id: str) -> ChatSession:
        return self.sessions.get_or_create(
            conversation_id,
            lambda: self.provider.create_chat_session(self.model_name, self.chat_config),
        )

    async def ask(self, prompt: str, conversation_id: str | None, caller: User) -> AskResponse:
        """
        Send one user turn to the conversation's chat session.

        Ownership is settled before any session is touched, so a rejected
        request never creates a session nor reaches the provider.

        Raises:
            NotFoundError, PermissionDeniedError: see `resolve_conversation`.
            UpstreamFailureError: the provider failed; not retried.
            RepositoryError: storage failure.
        """
        logger.info(
            "oriento.ask.start",
            extra={"user_id": str(caller.id), "conversation_id": conversation_id, "model_name": self.model_name},
        )
        logger.debug("oriento.ask.prompt", extra={"prompt": prompt})

        conversation = await self.resolve_conversation(conversation_id, caller)
        session = self.get_or_create_chat_session(conversation.id)

        start = time.perf_counter()
        response_text = await session.send(prompt)

        logger.info(
            "oriento.ask.success",
            extra={
                "conversation_id": conversation.id,
                "response_length": len(response_text),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        # history_length() reads provider-side state; only touch it when it will be logged
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("oriento.ask.response", extra={"response": response_text})
            logger.debug(
                "oriento.ask.history",
                extra={"conversation_id": conversation.id, "history_length": session.history_length()},
            )

        return AskResponse(conversation_id=conversation.id, response=response_text)
