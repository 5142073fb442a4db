"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

All SQLAlchemy ORM models are exported from this module.

Usage:
    from app.models import User, Project, Defect, Role
"""

from .user import User
from .project import Project
from .defect import Defect, DefectComment, DefectStatusChange
from .role_enum import Role

__all__ = [
    "User",
    "Project",
    "Defect",
    "DefectComment",
    "DefectStatusChange",
    "Role",
]
