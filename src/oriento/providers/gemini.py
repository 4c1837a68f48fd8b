"""
Gemini implementation of the provider capability, on top of the `google-genai` SDK.

`client.aio.chats.create(...)` only builds a local `AsyncChat` object: no request
is made until the first `send_message`. Building a session and discarding it
therefore costs nothing remotely.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from google import genai
from google.genai import types

from oriento.exceptions.base import UpstreamFailureError
from .base import ChatConfig, ChatProvider, ChatSession

if TYPE_CHECKING:
    from oriento.config.settings import Settings

logger = logging.getLogger(__name__)


class GeminiChatSession(ChatSession):

    def __init__(self, chat, model_name: str):
        # chat: google.genai.chats.AsyncChat
        self._chat = chat
        self.model_name = model_name

    async def send(self, prompt: str) -> str:
        try:
            response = await self._chat.send_message(prompt)
        except Exception as exc:
            logger.error(
                "gemini.send_message.failed",
                extra={"model_name": self.model_name, "error_type": type(exc).__name__},
            )
            raise UpstreamFailureError(provider=GeminiChatProvider.name) from exc

        text = response.text
        if not text:
            finish_reason = None
            if response.candidates:
                finish_reason = response.candidates[0].finish_reason
            logger.warning(
                "gemini.send_message.empty_response",
                extra={"model_name": self.model_name, "finish_reason": str(finish_reason)},
            )
            raise UpstreamFailureError(
                "The language model returned an empty response",
                provider=GeminiChatProvider.name,
            )
        return text

    def history_length(self) -> int:
        return len(self._chat.get_history(curated=True))


class GeminiChatProvider(ChatProvider):

    name = "gemini"

    def __init__(self, client: genai.Client):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiChatProvider":
        """
        Build the SDK client. Without GEMINI_API_KEY the SDK falls back to its own
        environment lookup (GOOGLE_API_KEY / GEMINI_API_KEY).
        """
        api_key = settings.GEMINI_API_KEY.get_secret_value() if settings.GEMINI_API_KEY else None
        client = genai.Client(
            api_key=api_key,
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(timeout=int(settings.GEMINI_TIMEOUT_SECONDS * 1000)),
        )
        logger.info("gemini.client.ready", extra={"timeout_s": settings.GEMINI_TIMEOUT_SECONDS})
        return cls(client)

    def create_chat_session(self, model_name: str, config: ChatConfig) -> GeminiChatSession:
        chat = self.client.aio.chats.create(
            model=model_name,
            config=types.GenerateContentConfig(
                system_instruction=config.system_instruction,
                temperature=config.temperature,
            ),
        )
        return GeminiChatSession(chat, model_name)
