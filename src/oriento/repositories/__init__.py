"""
Repository layer.

Usage:
    from oriento.repositories import UserRepository, ConversationRepository
"""

from .base_repository import BaseRepository
from .user_repository import UserRepository
from .conversation_repository import ConversationRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ConversationRepository",
]
