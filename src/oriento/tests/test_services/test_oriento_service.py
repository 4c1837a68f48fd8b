import logging
import uuid

import pytest

from oriento.exceptions.base import (
    NotFoundError,
    PermissionDeniedError,
    UpstreamFailureError,
)
from oriento.prompts.oriento import DEFAULT_MODEL_NAME, ORIENTO_SYSTEM_INSTRUCTION
from oriento.providers.base import ChatConfig
from oriento.repositories.conversation_repository import ConversationRepository
from oriento.schemas.ask import AskResponse
from oriento.services.chat_sessions import ChatSessionRegistry
from oriento.services.oriento_service import OrientoService

from ..test_fixtures.provider_fixtures import FakeChatProvider


@pytest.fixture
def registry() -> ChatSessionRegistry:
    return ChatSessionRegistry()


@pytest.fixture
def chat_config() -> ChatConfig:
    return ChatConfig(system_instruction=ORIENTO_SYSTEM_INSTRUCTION, temperature=0.3)


@pytest.fixture
def make_service(db_session, registry, chat_config):
    def _make(provider) -> OrientoService:
        return OrientoService(
            conversations=ConversationRepository(db_session),
            sessions=registry,
            provider=provider,
            model_name=DEFAULT_MODEL_NAME,
            chat_config=chat_config,
        )
    return _make


@pytest.fixture
def service(make_service, fake_provider) -> OrientoService:
    return make_service(fake_provider)


@pytest.mark.asyncio
class TestResolveConversation:

    @pytest.mark.parametrize("conversation_id", [None, "", "   "])
    async def test_no_id_creates_owned_conversation(self, service, created_user, conversation_id):
        conversation = await service.resolve_conversation(conversation_id, created_user)

        assert uuid.UUID(conversation.id).version == 4
        assert conversation.belongs_to(created_user)
        stored = await service.conversations.find_by_id(conversation.id)
        assert stored is not None

    async def test_each_new_conversation_gets_fresh_id(self, service, created_user):
        first = await service.resolve_conversation(None, created_user)
        second = await service.resolve_conversation(None, created_user)
        assert first.id != second.id

    async def test_existing_owned_conversation(self, service, created_user):
        created = await service.resolve_conversation(None, created_user)

        resolved = await service.resolve_conversation(f"  {created.id} ", created_user)

        assert resolved.id == created.id

    async def test_unknown_id_not_found(self, service, created_user):
        with pytest.raises(NotFoundError) as exc_info:
            await service.resolve_conversation("no-such-conversation", created_user)
        assert exc_info.value.fields == ["conversationId"]

    async def test_foreign_conversation_denied(self, service, created_user, other_user):
        created = await service.resolve_conversation(None, created_user)

        with pytest.raises(PermissionDeniedError):
            await service.resolve_conversation(created.id, other_user)


@pytest.mark.asyncio
class TestAsk:

    async def test_ask_without_id_starts_conversation(self, service, fake_provider, registry, created_user):
        """
        Behavior:
            - A new conversation row is persisted for the caller.
            - One chat session is built with the configured model and instruction.
            - The prompt is sent once and the response text returned with the new id.
        """
        result = await service.ask("O que é fluxo de caixa?", None, created_user)

        assert isinstance(result, AskResponse)
        assert result.response == "Resposta 1: O que é fluxo de caixa?"
        conversation = await service.conversations.find_by_id(result.conversation_id)
        assert conversation is not None
        assert conversation.belongs_to(created_user)

        assert len(fake_provider.sessions) == 1
        session = fake_provider.sessions[0]
        assert session.model_name == DEFAULT_MODEL_NAME
        assert session.config.system_instruction == ORIENTO_SYSTEM_INSTRUCTION
        assert registry.get(result.conversation_id) is session

    async def test_follow_up_reuses_session(self, service, fake_provider, created_user):
        first = await service.ask("O que é fluxo de caixa?", None, created_user)
        second = await service.ask("E como posso melhorá-lo?", first.conversation_id, created_user)

        assert second.conversation_id == first.conversation_id
        assert len(fake_provider.sessions) == 1
        assert fake_provider.sessions[0].prompts == [
            "O que é fluxo de caixa?",
            "E como posso melhorá-lo?",
        ]
        assert fake_provider.sessions[0].history_length() == 4

    async def test_separate_conversations_get_separate_sessions(self, service, fake_provider, created_user):
        a = await service.ask("Primeira", None, created_user)
        b = await service.ask("Segunda", None, created_user)

        assert a.conversation_id != b.conversation_id
        assert len(fake_provider.sessions) == 2

    async def test_foreign_conversation_never_reaches_provider(
        self, service, fake_provider, registry, created_user, other_user
    ):
        owned = await service.ask("Olá", None, created_user)
        sessions_before = len(fake_provider.sessions)

        with pytest.raises(PermissionDeniedError):
            await service.ask("Quero ver a conversa dela", owned.conversation_id, other_user)

        assert len(fake_provider.sessions) == sessions_before
        assert fake_provider.prompts == ["Olá"]
        assert len(registry) == 1

    async def test_unknown_conversation_never_reaches_provider(self, service, fake_provider, registry, created_user):
        with pytest.raises(NotFoundError):
            await service.ask("Olá", "unknown-id", created_user)

        assert fake_provider.sessions == []
        assert len(registry) == 0

    async def test_provider_failure_surfaces_as_upstream_failure(self, make_service, created_user):
        provider = FakeChatProvider(fail_with=TimeoutError("deadline exceeded"))
        service = make_service(provider)

        with pytest.raises(UpstreamFailureError) as exc_info:
            await service.ask("Olá", None, created_user)

        assert exc_info.value.http_status() == 502
        assert isinstance(exc_info.value.__cause__, TimeoutError)
        # attempted exactly once, no retry
        assert provider.prompts == ["Olá"]

    async def test_conversation_survives_provider_failure(self, make_service, created_user):
        """
        Behavior:
            - The conversation row is committed before the provider call, so a
              failed first turn leaves a conversation the caller can retry on.
        """
        provider = FakeChatProvider(fail_with=RuntimeError("quota"))
        service = make_service(provider)

        with pytest.raises(UpstreamFailureError):
            await service.ask("Olá", None, created_user)

        assert await service.conversations.count_user_conversations(created_user.id) == 1

    async def test_history_length_skipped_unless_debug(self, make_service, created_user, caplog):
        """
        Behavior:
            - The session's history is only read for DEBUG logging; a failing
              history read cannot turn an answered turn into an error.
        """
        class BrokenHistoryProvider(FakeChatProvider):
            def create_chat_session(self, model_name, config):
                session = super().create_chat_session(model_name, config)

                def history_length():
                    raise RuntimeError("history unavailable")

                session.history_length = history_length
                return session

        caplog.set_level(logging.INFO, logger="oriento.services.oriento_service")
        service = make_service(BrokenHistoryProvider())

        result = await service.ask("Olá", None, created_user)

        assert result.response == "Resposta 1: Olá"
