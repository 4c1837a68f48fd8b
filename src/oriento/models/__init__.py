"""
Centralized access to all database models.

    from oriento.models import User, Conversation

Importing this package also registers every table on `Base.metadata`.
"""

from .user import User
from .conversation import Conversation

__all__ = [
    "User",
    "Conversation",
]
