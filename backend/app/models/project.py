"""
Project Model
=============

A project groups defects. Deleting a project deletes its defects.
"""

import uuid
from datetime import datetime, UTC
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from app.db.base import Base
from app.core.enums import ProjectEnvironment

if TYPE_CHECKING:
    from app.models.defect import Defect


class Project(Base):
    """
    Project entity.

    Attributes:
        id: UUID primary key
        name: Project name
        environment: Deployment environment token (live, staging, dev)
        created_at: Creation timestamp
        defects: Defects reported against this project
    """

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    environment: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProjectEnvironment.DEV.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    defects: Mapped[List["Defect"]] = relationship(
        "Defect",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name}, environment={self.environment})>"
