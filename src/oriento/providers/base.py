from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChatConfig:
    """Fixed per-session configuration sent to the provider."""

    system_instruction: str
    temperature: float | None = None


class ChatSession(ABC):
    """
    Handle to the provider's multi-turn chat state for one conversation.

    Turn history is held by the session object itself; it is not persisted.
    """

    @abstractmethod
    async def send(self, prompt: str) -> str:
        """
        Send one user turn and return the model's text.

        Raises:
            UpstreamFailureError: the provider failed or returned no usable text.
        """

    @abstractmethod
    def history_length(self) -> int:
        """Number of turns (user + model) currently held by the session."""


class ChatProvider(ABC):
    """Factory for chat sessions."""

    name: str = "provider"

    @abstractmethod
    def create_chat_session(self, model_name: str, config: ChatConfig) -> ChatSession:
        """
        Build a new, empty chat session.

        Must be a local construction only: a session that is built and then
        thrown away must leave nothing behind on the provider side.
        """
