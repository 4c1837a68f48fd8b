"""
Generative-model provider capability.

The service depends only on the interfaces in `base`; the Gemini
implementation lives in `oriento.providers.gemini` and is imported by the app
factory, so tests never need the network client.
"""

from .base import ChatConfig, ChatProvider, ChatSession

__all__ = ["ChatConfig", "ChatProvider", "ChatSession"]
