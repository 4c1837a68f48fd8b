from sqlalchemy import String, DateTime, ForeignKey, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from oriento.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .user import User


class Conversation(Base):
    """
    SQLAlchemy model for a Conversation with the Oriento assistant.

    A conversation is owned by exactly one user, fixed at creation. Its id is
    also the key of the in-memory provider chat session.
    """
    __tablename__ = "conversations"

    # Opaque string id (a UUID4 string today); never updated
    id: Mapped[str] = mapped_column(
        String(60),
        primary_key=True,
    )

    # Owner. Not exposed for reassignment anywhere in the repository layer.
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    # Set by the database on first insert
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    # Many-to-One: Each conversation belongs to a single user
    user: Mapped["User"] = relationship(
        "User",
        back_populates="conversations",
        lazy="raise_on_sql"
    )

    def belongs_to(self, user: "User | None") -> bool:
        """
        Ownership check: True only when both sides carry an id and the ids match.
        """
        if user is None or self.user_id is None:
            return False
        user_id = getattr(user, "id", None)
        if user_id is None:
            return False
        return self.user_id == user_id

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id!r}, user_id={self.user_id!r})>"
