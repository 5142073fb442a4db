"""
Project Service Tests
=====================

Tests for project creation and partial updates.
"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import ProjectNotFoundError, ValidationError
from app.models.project import Project
from app.services.project_service import ProjectService


pytestmark = pytest.mark.integration


class TestCreateProject:
    """Tests for ProjectService.create_project."""

    def test_create_project(self, db_session: Session):
        # Act
        project = ProjectService(db_session).create_project("Mobile App", "live")

        # Assert
        assert project.environment == "live"
        assert db_session.query(Project).count() == 1

    @pytest.mark.parametrize("name", [None, "", "   ", 42])
    def test_invalid_name_is_a_validation_error(self, db_session: Session, name):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            ProjectService(db_session).create_project(name, "dev")

        # Assert
        assert exc_info.value.field == "name"
        assert db_session.query(Project).count() == 0

    def test_unknown_environment(self, db_session: Session):
        with pytest.raises(ValidationError) as exc_info:
            ProjectService(db_session).create_project("Mobile App", "production")

        assert exc_info.value.field == "environment"


class TestUpdateProject:
    """Tests for ProjectService.update_project."""

    def test_partial_update(self, db_session: Session, sample_project: Project):
        # Act
        project = ProjectService(db_session).update_project(
            sample_project.id, {"environment": "live"}
        )

        # Assert
        assert project.environment == "live"
        assert project.name == "Checkout Revamp"

    def test_unknown_field_changes_nothing(self, db_session: Session, sample_project: Project):
        # Act
        with pytest.raises(ValidationError):
            ProjectService(db_session).update_project(
                sample_project.id, {"environment": "live", "owner": "someone"}
            )

        # Assert
        db_session.expire_all()
        assert db_session.get(Project, sample_project.id).environment == "staging"

    def test_missing_project(self, db_session: Session):
        with pytest.raises(ProjectNotFoundError):
            ProjectService(db_session).update_project(uuid4(), {"name": "Ghost"})
