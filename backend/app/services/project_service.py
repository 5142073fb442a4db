"""
Project Service Module
======================

Create, read, update and delete projects.
"""

from typing import Any, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.enums import ProjectEnvironment
from app.core.exceptions import ProjectNotFoundError, ValidationError
from app.core.logging import get_logger, audit_logger
from app.models.project import Project

# Initialize logger
logger = get_logger(__name__)

PROJECT_FIELDS = ("name", "environment")


def _validate_project_fields(fields: Mapping[str, Any]) -> dict:
    """Validate supplied project fields and return them normalized."""
    for key in fields:
        if key not in PROJECT_FIELDS:
            raise ValidationError(
                message=f"Unknown project field: {key}",
                field=key,
                value=fields[key],
            )

    normalized = dict(fields)

    name = normalized.get("name", "")
    if "name" in normalized and (not isinstance(name, str) or not name.strip()):
        raise ValidationError(
            message="Name must not be empty",
            field="name",
            value=normalized["name"],
        )

    if "environment" in normalized:
        raw = normalized["environment"]
        try:
            normalized["environment"] = ProjectEnvironment(raw).value
        except ValueError:
            raise ValidationError(
                message=f"Invalid environment: {raw!r}",
                field="environment",
                value=raw,
            )

    return normalized


class ProjectService:
    """Service for project management."""

    def __init__(self, db: Session):
        self.db = db

    def list_projects(self) -> List[Project]:
        return self.db.query(Project).order_by(Project.created_at.desc()).all()

    def get_project(self, project_id: UUID) -> Project:
        """
        Get a project by id.

        Raises:
            ProjectNotFoundError: If no such project exists
        """
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ProjectNotFoundError(identifier=str(project_id))
        return project

    def create_project(
        self,
        name: str,
        environment: Any,
        actor_id: Optional[UUID] = None,
    ) -> Project:
        """
        Create a project.

        Raises:
            ValidationError: On a blank name or unknown environment
        """
        fields = _validate_project_fields({"name": name, "environment": environment})

        project = Project(**fields)
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        audit_logger.log_change(
            action="project_created",
            actor_id=str(actor_id) if actor_id else None,
            resource="project",
            resource_id=str(project.id),
        )

        return project

    def update_project(
        self,
        project_id: UUID,
        update_data: Mapping[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> Project:
        """
        Apply a partial update to a project.

        Fields that are absent or None are left unchanged.

        Raises:
            ProjectNotFoundError: If no such project exists
            ValidationError: On a blank name or unknown environment
        """
        project = self.get_project(project_id)

        supplied = _validate_project_fields(
            {key: value for key, value in update_data.items() if value is not None}
        )

        for key, value in supplied.items():
            setattr(project, key, value)

        self.db.commit()
        self.db.refresh(project)

        if supplied:
            audit_logger.log_change(
                action="project_updated",
                actor_id=str(actor_id) if actor_id else None,
                resource="project",
                resource_id=str(project.id),
                fields=sorted(supplied),
            )

        return project

    def delete_project(self, project_id: UUID, actor_id: Optional[UUID] = None) -> None:
        """
        Delete a project together with its defects.

        Raises:
            ProjectNotFoundError: If no such project exists
        """
        project = self.get_project(project_id)

        self.db.delete(project)
        self.db.commit()

        audit_logger.log_change(
            action="project_deleted",
            actor_id=str(actor_id) if actor_id else None,
            resource="project",
            resource_id=str(project_id),
        )
