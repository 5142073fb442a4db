"""
Defect Models
=============

Defect records plus their append-only comment thread and status history.

The enumerated columns (type, severity, priority, status) hold raw
vocabulary tokens. Writes go through app.services.defect_update, which
guarantees those tokens are valid before they reach the database.
"""

import uuid
from datetime import datetime, UTC
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import String, Text, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from app.db.base import Base
from app.services.defect_update import DEFECT_FIELDS

if TYPE_CHECKING:
    from app.models.project import Project
    from app.models.user import User


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Defect(Base):
    """
    Defect entity.

    Attributes:
        id: UUID primary key
        project_id: Owning project
        name: Short summary
        description: Full description
        screenshot: Identifier of an uploaded screenshot in external storage
        assigned_to: Assignee user id
        reporter_id: Reporting user id
        type, severity, priority, status: Vocabulary tokens
        created_at: Report timestamp
        updated_at: Timestamp of the last update, None if never updated
    """

    __tablename__ = "defects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    screenshot: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    reporter_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    type: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    project: Mapped["Project"] = relationship("Project", back_populates="defects")
    assignee: Mapped[Optional["User"]] = relationship("User", foreign_keys=[assigned_to])
    reporter: Mapped[Optional["User"]] = relationship("User", foreign_keys=[reporter_id])

    comments: Mapped[List["DefectComment"]] = relationship(
        "DefectComment",
        back_populates="defect",
        cascade="all, delete-orphan",
        order_by="DefectComment.id",
    )
    status_history: Mapped[List["DefectStatusChange"]] = relationship(
        "DefectStatusChange",
        back_populates="defect",
        cascade="all, delete-orphan",
        order_by="DefectStatusChange.id",
    )

    def to_record(self) -> Dict[str, Any]:
        """
        Get the updatable fields as a plain dict.

        Returns:
            Mapping of field name to current value
        """
        return {field: getattr(self, field) for field in DEFECT_FIELDS}

    def __repr__(self) -> str:
        return f"<Defect(id={self.id}, name={self.name}, status={self.status})>"


class DefectComment(Base):
    """A comment on a defect. Comments are never edited."""

    __tablename__ = "defect_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    defect_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("defects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    defect: Mapped["Defect"] = relationship("Defect", back_populates="comments")


class DefectStatusChange(Base):
    """One entry in a defect's status history."""

    __tablename__ = "defect_status_changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    defect_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("defects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    defect: Mapped["Defect"] = relationship("Defect", back_populates="status_history")
