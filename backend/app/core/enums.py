"""
Enumeration Module
==================

Defines the closed vocabularies used across the application.

Every defect carries a type, severity, priority and status drawn from
the vocabularies below. Declaration order is display order only;
severity and priority are categorical, so no ordering arithmetic is
defined on them.
"""

from enum import Enum
from typing import Any, NamedTuple, Optional, Type


class DefectType(str, Enum):
    """Kind of problem a defect reports."""

    FUNCTIONAL = "functional"
    UI_AND_USABILITY = "ui and usability"
    CONTENT = "content"
    IMPROVEMENT_REQUEST = "improvement request"
    UNIT_TEST_FAILURE = "unit test failure"


class DefectSeverity(str, Enum):
    """Impact of a defect."""

    MINOR = "minor"
    MEDIUM = "medium"
    MAJOR = "major"
    CRITICAL = "critical"
    BLOCKER = "blocker"


class DefectPriority(str, Enum):
    """Scheduling priority of a defect."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DefectStatus(str, Enum):
    """
    Lifecycle status of a defect.

    The usual path is open -> in progress -> fixed -> verified, with
    reopened, deferred and hold as side branches. No transition graph
    is enforced: any status may replace any other.
    """

    OPEN = "open"
    IN_PROGRESS = "in progress"
    FIXED = "fixed"
    VERIFIED = "verified"
    REOPENED = "reopened"
    DEFERRED = "deferred"
    HOLD = "hold"


class ProjectEnvironment(str, Enum):
    """Environment a project is deployed to."""

    LIVE = "live"
    STAGING = "staging"
    DEV = "dev"


class DefectField(str, Enum):
    """Names of the enumerated defect fields."""

    TYPE = "type"
    SEVERITY = "severity"
    PRIORITY = "priority"
    STATUS = "status"


class VocabularyOption(NamedTuple):
    """Display metadata for one vocabulary token."""

    value: str
    label: str
    color: Optional[str] = None


DEFECT_TYPE_OPTIONS: tuple[VocabularyOption, ...] = (
    VocabularyOption(DefectType.FUNCTIONAL.value, "Functional"),
    VocabularyOption(DefectType.UI_AND_USABILITY.value, "UI and Usability"),
    VocabularyOption(DefectType.CONTENT.value, "Content"),
    VocabularyOption(DefectType.IMPROVEMENT_REQUEST.value, "Improvement Request"),
    VocabularyOption(DefectType.UNIT_TEST_FAILURE.value, "Unit Test Failure"),
)

DEFECT_SEVERITY_OPTIONS: tuple[VocabularyOption, ...] = (
    VocabularyOption(DefectSeverity.MINOR.value, "Minor", "secondary"),
    VocabularyOption(DefectSeverity.MEDIUM.value, "Medium", "default"),
    VocabularyOption(DefectSeverity.MAJOR.value, "Major", "destructive"),
    VocabularyOption(DefectSeverity.CRITICAL.value, "Critical", "destructive"),
    VocabularyOption(DefectSeverity.BLOCKER.value, "Blocker", "destructive"),
)

DEFECT_PRIORITY_OPTIONS: tuple[VocabularyOption, ...] = (
    VocabularyOption(DefectPriority.LOW.value, "Low", "secondary"),
    VocabularyOption(DefectPriority.MEDIUM.value, "Medium", "default"),
    VocabularyOption(DefectPriority.HIGH.value, "High", "destructive"),
)

DEFECT_STATUS_OPTIONS: tuple[VocabularyOption, ...] = (
    VocabularyOption(DefectStatus.OPEN.value, "Open"),
    VocabularyOption(DefectStatus.IN_PROGRESS.value, "In Progress"),
    VocabularyOption(DefectStatus.FIXED.value, "Fixed"),
    VocabularyOption(DefectStatus.VERIFIED.value, "Verified"),
    VocabularyOption(DefectStatus.REOPENED.value, "Reopened"),
    VocabularyOption(DefectStatus.DEFERRED.value, "Deferred"),
    VocabularyOption(DefectStatus.HOLD.value, "Hold"),
)


def _enum_for(field: DefectField) -> Type[Enum]:
    # Exhaustive over DefectField; a new field must be added here.
    if field is DefectField.TYPE:
        return DefectType
    if field is DefectField.SEVERITY:
        return DefectSeverity
    if field is DefectField.PRIORITY:
        return DefectPriority
    if field is DefectField.STATUS:
        return DefectStatus
    raise AssertionError(f"Unhandled defect field: {field!r}")


def _options_for(field: DefectField) -> tuple[VocabularyOption, ...]:
    if field is DefectField.TYPE:
        return DEFECT_TYPE_OPTIONS
    if field is DefectField.SEVERITY:
        return DEFECT_SEVERITY_OPTIONS
    if field is DefectField.PRIORITY:
        return DEFECT_PRIORITY_OPTIONS
    if field is DefectField.STATUS:
        return DEFECT_STATUS_OPTIONS
    raise AssertionError(f"Unhandled defect field: {field!r}")


def as_defect_field(field: Any) -> DefectField:
    """
    Coerce a field name to a DefectField.

    Raises:
        ValueError: If the name is not one of the enumerated fields.
            This is a caller error, not a data error.
    """
    if isinstance(field, DefectField):
        return field
    return DefectField(field)


def vocabulary_for(field: Any) -> tuple[str, ...]:
    """
    Get the tokens of a field's vocabulary in display order.

    Args:
        field: DefectField or its name ("type", "severity", ...)

    Returns:
        Tuple of valid tokens
    """
    return tuple(member.value for member in _enum_for(as_defect_field(field)))


def options_for(field: Any) -> tuple[VocabularyOption, ...]:
    """Get the display options of a field's vocabulary."""
    return _options_for(as_defect_field(field))


def validate_enum_member(field: Any, value: Any) -> bool:
    """
    Check that a value is exactly one of the tokens of a field's vocabulary.

    Enum members are compared by their token. No case folding or
    trimming is applied, so "Open" and " open" are rejected.

    Args:
        field: DefectField or its name
        value: Candidate token

    Returns:
        True if value is a member of the vocabulary
    """
    vocabulary = vocabulary_for(field)
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return False
    return value in vocabulary


def get_label(field: Any, value: str) -> str:
    """
    Get the display label for a token.

    Returns:
        The label, or the value itself if it is not in the vocabulary
    """
    for option in options_for(field):
        if option.value == value:
            return option.label
    return value
