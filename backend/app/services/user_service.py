"""
User Service Module
===================

User lookups, role resolution and user administration.

``get_role`` is the role lookup handed to ``has_permission``. It reads
the database on every call, so a role change takes effect on the very
next check.
"""

from typing import Any, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import (
    EmailAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging import get_logger, audit_logger
from app.core.permissions import has_permission
from app.models.role_enum import Role
from app.models.user import User

# Initialize logger
logger = get_logger(__name__)

USER_UPDATE_FIELDS = ("name", "email", "role")


def _as_uuid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _validate_user_fields(fields: Mapping[str, Any]) -> dict:
    """Validate supplied user fields and return them normalized."""
    for key in fields:
        if key not in USER_UPDATE_FIELDS:
            raise ValidationError(
                message=f"Unknown user field: {key}",
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

    if "role" in normalized:
        raw_role = normalized["role"]
        try:
            normalized["role"] = Role(raw_role).value
        except ValueError:
            raise ValidationError(
                message=f"Invalid role: {raw_role!r}",
                field="role",
                value=raw_role,
            )

    return normalized


class UserService:
    """
    Service for user lookups and administration.

    Usage:
        user_service = UserService(db)
        if user_service.check_permission(actor_id, Role.TESTER):
            ...
    """

    def __init__(self, db: Session):
        self.db = db

    # --------------------------
    # Role Resolution
    # --------------------------

    def get_role(self, user_id: Any) -> Optional[str]:
        """
        Get the current role token of a user.

        Args:
            user_id: User UUID (or its string form)

        Returns:
            Stored role token, or None if the user has no role or does not exist
        """
        user_uuid = _as_uuid(user_id)
        if user_uuid is None:
            return None

        return (
            self.db.query(User.role)
            .filter(User.id == user_uuid)
            .scalar()
        )

    def check_permission(self, user_id: Any, required_role: Role) -> bool:
        """
        Check whether a user holds at least the required role.

        Raises:
            ValueError: If required_role is not a valid Role
        """
        return has_permission(self.get_role, user_id, required_role)

    # --------------------------
    # Queries
    # --------------------------

    def list_users(self, role: Optional[Role] = None) -> List[User]:
        query = self.db.query(User)
        if role is not None:
            query = query.filter(User.role == Role(role).value)
        return query.order_by(User.created_at.desc()).all()

    def get_user(self, user_id: UUID) -> User:
        """
        Get a user by id.

        Raises:
            UserNotFoundError: If no such user exists
        """
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFoundError(identifier=str(user_id))
        return user

    # --------------------------
    # Mutations
    # --------------------------

    def _ensure_email_available(self, email: str, exclude_id: Optional[UUID] = None) -> None:
        query = self.db.query(User).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise EmailAlreadyExistsError(email=email)

    def create_user(
        self,
        name: str,
        email: str,
        role: Any,
        user_id: Optional[UUID] = None,
        actor_id: Optional[UUID] = None,
    ) -> User:
        """
        Create a user.

        Args:
            name: Display name
            email: Email address, unique across users
            role: Role token
            user_id: Subject the identity provider issues tokens for;
                generated when omitted
            actor_id: User performing the creation (for the audit trail)

        Returns:
            Created user

        Raises:
            ValidationError: On a blank name, an invalid role or a taken id
            EmailAlreadyExistsError: If the email belongs to another user
        """
        fields = _validate_user_fields({"name": name, "email": email, "role": role})
        self._ensure_email_available(fields["email"])

        if user_id is not None and self.db.get(User, user_id) is not None:
            raise ValidationError(
                message="User id already exists",
                field="id",
                value=str(user_id),
            )

        user = User(id=user_id, **fields) if user_id is not None else User(**fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        audit_logger.log_change(
            action="user_created",
            actor_id=str(actor_id) if actor_id else None,
            resource="user",
            resource_id=str(user.id),
            role=user.role,
        )

        return user

    def update_user(
        self,
        user_id: UUID,
        update_data: Mapping[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> User:
        """
        Apply a partial update to a user.

        Fields that are absent or None are left unchanged. Every supplied
        field is validated before any of them is written.

        Args:
            user_id: User to update
            update_data: Any of name, email, role
            actor_id: User performing the update (for the audit trail)

        Returns:
            Updated user

        Raises:
            UserNotFoundError: If no such user exists
            ValidationError: On unknown fields, a blank name or an invalid role
            EmailAlreadyExistsError: If the email belongs to another user
        """
        user = self.get_user(user_id)
        supplied = _validate_user_fields(
            {key: value for key, value in update_data.items() if value is not None}
        )

        if "email" in supplied and supplied["email"] != user.email:
            self._ensure_email_available(supplied["email"], exclude_id=user.id)

        # Track changes for audit
        changes = {}
        for key, value in supplied.items():
            old_value = getattr(user, key)
            if old_value != value:
                changes[key] = {"old": old_value, "new": value}
                setattr(user, key, value)

        self.db.commit()
        self.db.refresh(user)

        if changes:
            audit_logger.log_change(
                action="user_updated",
                actor_id=str(actor_id) if actor_id else None,
                resource="user",
                resource_id=str(user.id),
                changes=changes,
            )

        return user

    def delete_user(self, user_id: UUID, actor_id: Optional[UUID] = None) -> None:
        """
        Delete a user.

        Defects reported by or assigned to the user are kept; their
        references are cleared by the database.

        Raises:
            UserNotFoundError: If no such user exists
        """
        user = self.get_user(user_id)

        self.db.delete(user)
        self.db.commit()

        audit_logger.log_change(
            action="user_deleted",
            actor_id=str(actor_id) if actor_id else None,
            resource="user",
            resource_id=str(user_id),
        )
