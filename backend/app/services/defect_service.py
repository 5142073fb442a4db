"""
Defect Service Module
=====================

Persistence-side operations on defects.

All field validation and merging is delegated to
app.services.defect_update; this service adds what needs the database:
referential checks, the status history, the updated_at stamp,
comments and the audit trail.
"""

from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import DefectNotFoundError, ValidationError
from app.core.logging import get_logger, audit_logger
from app.models.defect import Defect, DefectComment, DefectStatusChange
from app.models.project import Project
from app.models.user import User
from app.services.defect_update import (
    DEFECT_FIELDS,
    apply_partial_update,
    validate_new_defect,
)

# Initialize logger
logger = get_logger(__name__)

UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_REPORTER = "Unknown Reporter"
UNKNOWN_USER = "Unknown User"


def _token(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def serialize_defect(defect: Defect) -> Dict[str, Any]:
    """
    Convert a defect to a response dict with display names resolved.

    Missing related records fall back to placeholder names.
    """
    project = defect.project
    reporter = defect.reporter
    assignee = defect.assignee

    assigned_to_name = None
    if defect.assigned_to is not None:
        assigned_to_name = (assignee.display_name if assignee else None) or UNKNOWN_USER

    return {
        "id": defect.id,
        "project_id": defect.project_id,
        "project_name": project.name if project else UNKNOWN_PROJECT,
        "name": defect.name,
        "description": defect.description,
        "screenshot": defect.screenshot,
        "assigned_to": defect.assigned_to,
        "assigned_to_name": assigned_to_name,
        "reporter_id": defect.reporter_id,
        "reporter_name": (reporter.display_name if reporter else None) or UNKNOWN_REPORTER,
        "type": defect.type,
        "severity": defect.severity,
        "priority": defect.priority,
        "status": defect.status,
        "created_at": defect.created_at,
        "updated_at": defect.updated_at,
        "comments": [
            {
                "text": comment.text,
                "author_id": comment.author_id,
                "created_at": comment.created_at,
            }
            for comment in defect.comments
        ],
        "status_history": [
            {
                "status": entry.status,
                "changed_by": entry.changed_by,
                "changed_at": entry.changed_at,
            }
            for entry in defect.status_history
        ],
    }


class DefectService:
    """
    Service for defect management.

    Usage:
        defect_service = DefectService(db)
        defect = defect_service.update_defect(defect_id, {"status": "fixed"}, actor_id)
    """

    def __init__(self, db: Session):
        self.db = db

    # --------------------------
    # Queries
    # --------------------------

    def list_defects(
        self,
        project_id: Optional[UUID] = None,
        status: Optional[str] = None,
        severity: Optional[str] = None,
        priority: Optional[str] = None,
        type: Optional[str] = None,
        assigned_to: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        """
        List defects matching every supplied filter.

        Returns:
            Serialized defects, newest first
        """
        query = self.db.query(Defect).options(
            selectinload(Defect.project),
            selectinload(Defect.reporter),
            selectinload(Defect.assignee),
            selectinload(Defect.comments),
            selectinload(Defect.status_history),
        )

        # Apply filters
        if project_id is not None:
            query = query.filter(Defect.project_id == project_id)
        if status is not None:
            query = query.filter(Defect.status == _token(status))
        if severity is not None:
            query = query.filter(Defect.severity == _token(severity))
        if priority is not None:
            query = query.filter(Defect.priority == _token(priority))
        if type is not None:
            query = query.filter(Defect.type == _token(type))
        if assigned_to is not None:
            query = query.filter(Defect.assigned_to == assigned_to)

        defects = query.order_by(Defect.created_at.desc()).all()
        return [serialize_defect(defect) for defect in defects]

    def get_defect(self, defect_id: UUID) -> Defect:
        """
        Get a defect by id.

        Raises:
            DefectNotFoundError: If no such defect exists
        """
        defect = self.db.query(Defect).filter(Defect.id == defect_id).first()
        if not defect:
            raise DefectNotFoundError(identifier=str(defect_id))
        return defect

    # --------------------------
    # Reference Checks
    # --------------------------

    def _check_references(self, record: Mapping[str, Any], fields) -> None:
        if "project_id" in fields:
            project_id = record.get("project_id")
            exists = self.db.query(Project.id).filter(Project.id == project_id).first()
            if not exists:
                raise ValidationError(
                    message="Project does not exist",
                    field="project_id",
                    value=project_id,
                )

        if "assigned_to" in fields and record.get("assigned_to") is not None:
            assignee_id = record["assigned_to"]
            exists = self.db.query(User.id).filter(User.id == assignee_id).first()
            if not exists:
                raise ValidationError(
                    message="Assignee does not exist",
                    field="assigned_to",
                    value=assignee_id,
                )

    # --------------------------
    # Mutations
    # --------------------------

    def create_defect(self, payload: Mapping[str, Any], reporter_id: UUID) -> Defect:
        """
        Report a new defect.

        The initial status is recorded as the first status history entry.

        Raises:
            ValidationError: If a field is missing or invalid, or a
                referenced project or assignee does not exist
        """
        record = validate_new_defect(payload)
        self._check_references(record, ("project_id", "assigned_to"))

        defect = Defect(reporter_id=reporter_id, **record)
        defect.status_history.append(
            DefectStatusChange(status=record["status"], changed_by=reporter_id)
        )

        self.db.add(defect)
        self.db.commit()
        self.db.refresh(defect)

        audit_logger.log_change(
            action="defect_created",
            actor_id=str(reporter_id),
            resource="defect",
            resource_id=str(defect.id),
        )

        return defect

    def update_defect(
        self,
        defect_id: UUID,
        changes: Mapping[str, Any],
        actor_id: UUID,
    ) -> Defect:
        """
        Apply a partial update to a defect.

        Either every supplied field is applied or none is. A status
        history entry is appended only when the status actually changes;
        updated_at is stamped on every successful update.

        Args:
            defect_id: Defect to update
            changes: Sparse change set; absent or None fields are left unchanged
            actor_id: User performing the update

        Returns:
            Updated defect

        Raises:
            DefectNotFoundError: If no such defect exists
            ValidationError: If any supplied field is invalid
        """
        defect = self.get_defect(defect_id)

        existing = defect.to_record()
        merged = apply_partial_update(existing, changes)

        changed = [field for field in DEFECT_FIELDS if merged[field] != existing[field]]
        self._check_references(merged, changed)

        for field in changed:
            setattr(defect, field, merged[field])

        if "status" in changed:
            defect.status_history.append(
                DefectStatusChange(status=merged["status"], changed_by=actor_id)
            )

        defect.updated_at = datetime.now(UTC)

        self.db.commit()
        self.db.refresh(defect)

        audit_logger.log_change(
            action="defect_updated",
            actor_id=str(actor_id),
            resource="defect",
            resource_id=str(defect.id),
            changes={
                field: {"old": str(existing[field]), "new": str(merged[field])}
                for field in changed
            },
        )

        return defect

    def add_comment(self, defect_id: UUID, text: str, author_id: UUID) -> Defect:
        """
        Append a comment to a defect.

        Raises:
            DefectNotFoundError: If no such defect exists
            ValidationError: If the text is blank
        """
        defect = self.get_defect(defect_id)

        if not text or not text.strip():
            raise ValidationError(
                message="Comment must not be empty",
                field="text",
                value=text,
            )

        defect.comments.append(DefectComment(text=text, author_id=author_id))

        self.db.commit()
        self.db.refresh(defect)

        logger.info("comment_added", defect_id=str(defect_id), author_id=str(author_id))

        return defect

    def delete_defect(self, defect_id: UUID, actor_id: UUID) -> None:
        """
        Delete a defect with its comments and history.

        Raises:
            DefectNotFoundError: If no such defect exists
        """
        defect = self.get_defect(defect_id)

        self.db.delete(defect)
        self.db.commit()

        audit_logger.log_change(
            action="defect_deleted",
            actor_id=str(actor_id),
            resource="defect",
            resource_id=str(defect_id),
        )
