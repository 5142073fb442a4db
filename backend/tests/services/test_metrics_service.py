"""
Metrics Service Tests
=====================
"""

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from app.models.defect import Defect
from app.models.project import Project
from app.services.metrics_service import (
    generate_defects_over_time,
    generate_summary_metrics,
)


pytestmark = pytest.mark.integration


def _add_defect(db_session: Session, project: Project, created_at: datetime, **fields) -> Defect:
    values = {
        "name": "Defect",
        "description": "Details",
        "type": "functional",
        "severity": "minor",
        "priority": "low",
        "status": "open",
    }
    values.update(fields)
    defect = Defect(id=uuid.uuid4(), project_id=project.id, created_at=created_at, **values)
    db_session.add(defect)
    db_session.commit()
    return defect


class TestSummaryMetrics:

    def test_empty_database_is_zero_filled(self, db_session: Session):
        # Act
        metrics = generate_summary_metrics(db_session)

        # Assert
        assert metrics["total"] == 0
        assert metrics["by_status"]["hold"] == 0
        assert len(metrics["by_status"]) == 7
        assert len(metrics["by_severity"]) == 5
        assert len(metrics["by_priority"]) == 3
        assert len(metrics["by_type"]) == 5

    def test_counts(self, db_session: Session, sample_project: Project):
        # Arrange
        now = datetime.now(timezone.utc)
        _add_defect(db_session, sample_project, now, status="open", severity="blocker")
        _add_defect(db_session, sample_project, now, status="fixed", severity="blocker")
        _add_defect(db_session, sample_project, now, status="fixed", type="content")

        # Act
        metrics = generate_summary_metrics(db_session)

        # Assert
        assert metrics["total"] == 3
        assert metrics["by_status"]["fixed"] == 2
        assert metrics["by_severity"]["blocker"] == 2
        assert metrics["by_type"]["content"] == 1
        assert metrics["by_priority"]["low"] == 3

    def test_project_filter(self, db_session: Session, sample_project: Project):
        # Arrange
        other = Project(id=uuid.uuid4(), name="Other", environment="live")
        db_session.add(other)
        db_session.commit()
        now = datetime.now(timezone.utc)
        _add_defect(db_session, sample_project, now)
        _add_defect(db_session, other, now)

        # Act
        metrics = generate_summary_metrics(db_session, project_id=other.id)

        # Assert
        assert metrics["total"] == 1


class TestDefectsOverTime:

    def test_per_day_counts_by_type(self, db_session: Session, sample_project: Project):
        # Arrange
        day_one = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        day_two = datetime(2024, 3, 2, 15, 0, tzinfo=timezone.utc)
        _add_defect(db_session, sample_project, day_one, type="functional")
        _add_defect(db_session, sample_project, day_one, type="content")
        _add_defect(db_session, sample_project, day_two, type="functional")

        # Act
        result = generate_defects_over_time(db_session)

        # Assert
        assert [option["value"] for option in result["types"]][0] == "functional"
        assert [row["date"] for row in result["data"]] == ["2024-03-01", "2024-03-02"]
        assert result["data"][0]["functional"] == 1
        assert result["data"][0]["content"] == 1
        assert result["data"][0]["unit test failure"] == 0
        assert result["data"][1]["functional"] == 1
