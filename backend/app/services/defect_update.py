"""
Defect Partial-Update Module
============================

Validates and merges sparse change sets into defect records.

Rules:
- Omitted fields (absent or None) leave the stored value untouched
- Enumerated fields must be exact members of their vocabulary
- Mandatory text fields (name, description) may not be blank
- Validation covers the whole change set before anything is merged;
  one bad field rejects the entire update

The functions here are pure: they never touch the database and never
mutate the record they are given.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from app.core.enums import DefectField, validate_enum_member
from app.core.exceptions import ValidationError

DEFECT_FIELDS: tuple[str, ...] = (
    "project_id",
    "name",
    "description",
    "screenshot",
    "assigned_to",
    "type",
    "severity",
    "priority",
    "status",
)

MANDATORY_TEXT_FIELDS: tuple[str, ...] = ("name", "description")

ENUM_FIELDS: tuple[str, ...] = tuple(field.value for field in DefectField)

# Fields a newly reported defect must carry
REQUIRED_ON_CREATE: tuple[str, ...] = (
    "project_id",
    "name",
    "description",
    "type",
    "severity",
    "priority",
    "status",
)


def _normalize(value: Any) -> Any:
    """Reduce enum members to their raw token."""
    if isinstance(value, Enum):
        return value.value
    return value


class DefectChangeSet(BaseModel):
    """
    Sparse set of field assignments for a defect.

    A field left as None is omitted: it will not change the stored value.
    Enumerated fields are held as raw tokens so that invalid tokens can be
    reported by name rather than rejected at construction.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_id: Optional[UUID] = None
    name: Optional[str] = None
    description: Optional[str] = None
    screenshot: Optional[str] = None
    assigned_to: Optional[UUID] = None
    type: Optional[str] = None
    severity: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_mapping(cls, changes: Mapping[str, Any]) -> "DefectChangeSet":
        """
        Build a change set from a plain mapping.

        Raises:
            ValidationError: On unknown fields or values of the wrong type
        """
        data = {
            key: _normalize(value)
            for key, value in changes.items()
            if value is not None
        }

        for key in data:
            if key not in DEFECT_FIELDS:
                raise ValidationError(
                    message=f"Unknown defect field: {key}",
                    field=key,
                    value=data[key],
                )

        try:
            return cls(**data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else None
            raise ValidationError(
                message=f"Invalid value for {field}: {error['msg']}",
                field=field,
                value=data.get(field) if field else None,
            ) from e

    def present(self) -> Dict[str, Any]:
        """Get only the supplied fields."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.present()

    def validate_fields(self) -> None:
        """
        Validate every supplied field.

        Raises:
            ValidationError: Naming the first offending field and value
        """
        for field, value in self.present().items():
            if field in ENUM_FIELDS:
                if not validate_enum_member(field, value):
                    raise ValidationError(
                        message=f"Invalid {field}: {value!r}",
                        field=field,
                        value=value,
                    )
            elif field in MANDATORY_TEXT_FIELDS:
                if not value.strip():
                    raise ValidationError(
                        message=f"{field.capitalize()} must not be empty",
                        field=field,
                        value=value,
                    )


def apply_partial_update(
    existing: Mapping[str, Any],
    changes: Union[Mapping[str, Any], DefectChangeSet],
) -> Dict[str, Any]:
    """
    Merge a validated change set into a defect record.

    Args:
        existing: Current defect record
        changes: Sparse change set (mapping or DefectChangeSet)

    Returns:
        New record with the supplied fields overlaid

    Raises:
        ValidationError: If any supplied field is invalid. Nothing is
            merged in that case and ``existing`` is left as it was.
    """
    change_set = (
        changes if isinstance(changes, DefectChangeSet)
        else DefectChangeSet.from_mapping(changes)
    )
    change_set.validate_fields()

    merged = dict(existing)
    merged.update(change_set.present())
    return merged


def validate_new_defect(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate the fields of a defect being reported.

    Args:
        payload: Fields of the new defect

    Returns:
        Normalized record containing the supplied fields

    Raises:
        ValidationError: If a required field is missing or any field is invalid
    """
    change_set = DefectChangeSet.from_mapping(payload)
    present = change_set.present()

    for field in REQUIRED_ON_CREATE:
        if field not in present:
            raise ValidationError(
                message=f"{field.replace('_', ' ').capitalize()} is required",
                field=field,
                value=None,
            )

    change_set.validate_fields()

    record = {field: None for field in DEFECT_FIELDS}
    record.update(present)
    return record
