from types import SimpleNamespace

import pytest
from google import genai

from oriento.exceptions.base import UpstreamFailureError
from oriento.providers.base import ChatConfig
from oriento.providers.gemini import GeminiChatProvider, GeminiChatSession

from ..test_fixtures.settings import make_test_settings


class StubAsyncChat:
    """Stands in for google.genai.chats.AsyncChat."""

    def __init__(self, reply=None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.sent: list[str] = []
        self.history: list[str] = []

    async def send_message(self, message):
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        self.history.extend([message, self.reply.text])
        return self.reply

    def get_history(self, curated: bool = False):
        return list(self.history)


class StubChats:

    def __init__(self):
        self.created: list[dict] = []

    def create(self, *, model, config=None, history=None):
        self.created.append({"model": model, "config": config})
        return StubAsyncChat(reply=SimpleNamespace(text="ok", candidates=None))


def response(text):
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(finish_reason="SAFETY")])


@pytest.mark.asyncio
class TestGeminiChatSession:

    async def test_send_returns_text(self):
        chat = StubAsyncChat(reply=response("Fluxo de caixa é..."))
        session = GeminiChatSession(chat, "gemini-2.5-flash")

        text = await session.send("O que é fluxo de caixa?")

        assert text == "Fluxo de caixa é..."
        assert chat.sent == ["O que é fluxo de caixa?"]
        assert session.history_length() == 2

    async def test_provider_error_is_wrapped(self):
        cause = ConnectionError("reset by peer")
        session = GeminiChatSession(StubAsyncChat(error=cause), "gemini-2.5-flash")

        with pytest.raises(UpstreamFailureError) as exc_info:
            await session.send("Olá")

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.provider == "gemini"
        assert exc_info.value.error_code == "upstream_failure"

    @pytest.mark.parametrize("text", [None, ""])
    async def test_empty_response_is_upstream_failure(self, text):
        session = GeminiChatSession(StubAsyncChat(reply=response(text)), "gemini-2.5-flash")

        with pytest.raises(UpstreamFailureError):
            await session.send("Olá")


class TestGeminiChatProvider:

    def test_create_chat_session_is_local(self):
        chats = StubChats()
        client = SimpleNamespace(aio=SimpleNamespace(chats=chats))
        provider = GeminiChatProvider(client)
        config = ChatConfig(system_instruction="Você é Oriento.", temperature=0.2)

        session = provider.create_chat_session("gemini-2.5-flash", config)

        assert isinstance(session, GeminiChatSession)
        assert session.model_name == "gemini-2.5-flash"
        assert len(chats.created) == 1
        created = chats.created[0]
        assert created["model"] == "gemini-2.5-flash"
        assert created["config"].system_instruction == "Você é Oriento."
        assert created["config"].temperature == 0.2
        # nothing was sent while building the session
        assert session._chat.sent == []

    def test_from_settings_builds_client(self):
        settings = make_test_settings(GEMINI_API_KEY="test-key", GEMINI_TIMEOUT_SECONDS=12.5)

        provider = GeminiChatProvider.from_settings(settings)

        assert isinstance(provider.client, genai.Client)
