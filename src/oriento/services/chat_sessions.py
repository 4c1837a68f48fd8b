"""
In-memory registry of provider chat sessions, keyed by conversation id.

One instance lives for the lifetime of the app (`app.state.chat_sessions`).
Entries are never evicted; a restart drops every provider-side history while
the conversation rows survive.
"""
import logging
import threading
from typing import Callable

from oriento.providers.base import ChatSession

logger = logging.getLogger(__name__)


class ChatSessionRegistry:
    """
    Thread-safe `conversation_id -> ChatSession` mapping.

    `get_or_create` is atomic: for a given id exactly one session is ever
    stored, and every caller gets that one.
    """

    def __init__(self):
        self._sessions: dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> ChatSession | None:
        with self._lock:
            return self._sessions.get(conversation_id)

    def get_or_create(self, conversation_id: str, factory: Callable[[], ChatSession]) -> ChatSession:
        """
        Return the stored session for `conversation_id`, building one with
        `factory` when none exists.

        The factory runs outside the lock, so two first-time callers may both
        build a candidate. Only the first insert wins; the other candidate is
        dropped without ever being used.
        """
        existing = self.get(conversation_id)
        if existing is not None:
            return existing

        candidate = factory()
        with self._lock:
            stored = self._sessions.setdefault(conversation_id, candidate)

        if stored is candidate:
            logger.debug("chat_session.created", extra={"conversation_id": conversation_id})
        else:
            logger.debug("chat_session.discarded_duplicate", extra={"conversation_id": conversation_id})
        return stored

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, conversation_id: object) -> bool:
        with self._lock:
            return conversation_id in self._sessions
