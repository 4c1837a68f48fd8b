from .chat_sessions import ChatSessionRegistry
from .oriento_service import OrientoService

__all__ = ["ChatSessionRegistry", "OrientoService"]
