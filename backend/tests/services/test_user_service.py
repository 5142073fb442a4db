"""
User Service Tests
==================

Tests for role resolution, permission checks and user administration.
"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import (
    EmailAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from app.models.role_enum import Role
from app.models.user import User
from app.services.user_service import UserService


pytestmark = pytest.mark.integration


class TestGetRole:
    """Tests for UserService.get_role."""

    def test_returns_stored_role(self, db_session: Session, tester_user: User):
        assert UserService(db_session).get_role(tester_user.id) == "tester"

    def test_accepts_string_id(self, db_session: Session, tester_user: User):
        assert UserService(db_session).get_role(str(tester_user.id)) == "tester"

    def test_missing_user(self, db_session: Session):
        assert UserService(db_session).get_role(uuid4()) is None

    def test_malformed_id(self, db_session: Session):
        assert UserService(db_session).get_role("not-a-uuid") is None


class TestCheckPermission:
    """Tests for UserService.check_permission."""

    def test_developer_vs_tester(self, db_session: Session, developer_user: User):
        assert UserService(db_session).check_permission(developer_user.id, Role.TESTER) is False

    def test_manager_vs_manager(self, db_session: Session, manager_user: User):
        assert UserService(db_session).check_permission(manager_user.id, Role.MANAGER) is True

    @pytest.mark.parametrize("required_role", list(Role))
    def test_no_role_and_unknown_role(
        self,
        db_session: Session,
        no_role_user: User,
        unknown_role_user: User,
        required_role: Role,
    ):
        # Arrange
        service = UserService(db_session)

        # Assert
        assert service.check_permission(no_role_user.id, required_role) is False
        assert service.check_permission(unknown_role_user.id, required_role) is False
        assert service.check_permission(uuid4(), required_role) is False

    def test_role_change_is_seen_immediately(self, db_session: Session, developer_user: User):
        # Arrange
        service = UserService(db_session)
        assert service.check_permission(developer_user.id, Role.MANAGER) is False

        # Act
        service.update_user(developer_user.id, {"role": "manager"})

        # Assert
        assert service.check_permission(developer_user.id, Role.MANAGER) is True


class TestUpdateUser:
    """Tests for UserService.update_user."""

    def test_partial_update(self, db_session: Session, developer_user: User):
        # Act
        user = UserService(db_session).update_user(developer_user.id, {"name": "Dana D."})

        # Assert
        assert user.name == "Dana D."
        assert user.role == "developer"
        assert user.email == "dev@example.com"

    def test_invalid_role_rejects_whole_update(self, db_session: Session, developer_user: User):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            UserService(db_session).update_user(
                developer_user.id,
                {"name": "Changed", "role": "admin"},
            )

        # Assert
        assert exc_info.value.field == "role"
        db_session.expire_all()
        assert db_session.get(User, developer_user.id).name == "Dana Developer"

    def test_duplicate_email(self, db_session: Session, developer_user: User, tester_user: User):
        # Act & Assert
        with pytest.raises(EmailAlreadyExistsError):
            UserService(db_session).update_user(developer_user.id, {"email": tester_user.email})

    def test_blank_name(self, db_session: Session, developer_user: User):
        with pytest.raises(ValidationError):
            UserService(db_session).update_user(developer_user.id, {"name": "  "})

    def test_missing_user(self, db_session: Session):
        with pytest.raises(UserNotFoundError):
            UserService(db_session).update_user(uuid4(), {"name": "Ghost"})


class TestListAndDelete:
    """Tests for list_users and delete_user."""

    def test_filter_by_role(
        self,
        db_session: Session,
        developer_user: User,
        tester_user: User,
        manager_user: User,
    ):
        # Act
        users = UserService(db_session).list_users(role=Role.TESTER)

        # Assert
        assert [user.id for user in users] == [tester_user.id]

    def test_delete_user(self, db_session: Session, developer_user: User):
        # Act
        UserService(db_session).delete_user(developer_user.id)

        # Assert
        assert UserService(db_session).get_role(developer_user.id) is None


class TestCreateUser:
    """Tests for UserService.create_user."""

    def test_create_user(self, db_session: Session):
        # Act
        user = UserService(db_session).create_user(
            name="Nina New",
            email="nina@example.com",
            role=Role.TESTER,
        )

        # Assert
        assert user.id is not None
        assert user.role == "tester"
        assert UserService(db_session).get_role(user.id) == "tester"

    def test_create_with_provider_subject(self, db_session: Session):
        # Arrange
        subject = uuid4()

        # Act
        user = UserService(db_session).create_user(
            name="Sam Subject",
            email="sam@example.com",
            role="developer",
            user_id=subject,
        )

        # Assert
        assert user.id == subject

    def test_invalid_role(self, db_session: Session):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            UserService(db_session).create_user(
                name="Ivy", email="ivy@example.com", role="Manager"
            )

        # Assert
        assert exc_info.value.field == "role"
        assert db_session.query(User).count() == 0

    def test_duplicate_email(self, db_session: Session, developer_user: User):
        with pytest.raises(EmailAlreadyExistsError):
            UserService(db_session).create_user(
                name="Copy", email=developer_user.email, role="developer"
            )

    def test_taken_id(self, db_session: Session, developer_user: User):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            UserService(db_session).create_user(
                name="Twin",
                email="twin@example.com",
                role="developer",
                user_id=developer_user.id,
            )

        # Assert
        assert exc_info.value.field == "id"

    def test_non_string_name(self, db_session: Session):
        with pytest.raises(ValidationError):
            UserService(db_session).create_user(
                name=None, email="anon@example.com", role="developer"
            )
