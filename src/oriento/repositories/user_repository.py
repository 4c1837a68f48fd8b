"""
User repository for handling user-specific database operations.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from oriento.models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for User entity operations.

    Users are provisioned by the identity layer; the API itself only reads
    them. `create_user` exists for provisioning scripts and tests.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(
        self,
        username: str,
        email: str,
        is_active: bool = True
    ) -> User:
        """
        Create a user, normalising whitespace and email casing.

        Raises:
            DuplicateError: If the username or email is already taken.
        """
        logger.info("user.create", extra={"username": username.strip()})

        return await self.create(
            username=username.strip(),
            email=email.strip().lower(),
            is_active=is_active
        )

    async def get_by_username(self, username: str) -> User | None:
        return await self.find_by_field("username", username.strip())

    async def get_active_user(self, user_id: UUID) -> User | None:
        """
        Return the user only if it exists and is active.
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        if not user.is_active:
            logger.info("user.inactive", extra={"user_id": str(user_id)})
            return None
        return user
