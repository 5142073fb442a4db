"""
User Model
==========

Users are the actors of the defect tracker. The role column drives
authorization; a user with no role (or a role the application does not
recognize) holds no privilege at all.

Database Indexes:
- Primary key: id (UUID)
- Unique index: email
- Index: role
"""

import uuid
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import String, DateTime, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User entity.

    Attributes:
        id: UUID primary key
        name: Display name
        email: Unique email address
        role: Role token (developer, tester, manager) or None
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    # Stored as a plain string: unknown tokens must be representable
    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def display_name(self) -> Optional[str]:
        """Name if set, otherwise email."""
        return self.name or self.email
