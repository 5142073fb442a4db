"""
Metrics & Health Routes Integration Tests
=========================================
"""

import pytest
from fastapi.testclient import TestClient

from app.models.defect import Defect


pytestmark = pytest.mark.integration


class TestMetricsRoutes:

    def test_summary_requires_authentication(self, client: TestClient):
        assert client.get("/api/v1/metrics/summary").status_code == 401

    def test_summary(self, client: TestClient, no_role_headers: dict, sample_defect: Defect):
        # Act
        response = client.get("/api/v1/metrics/summary", headers=no_role_headers)

        # Assert
        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["by_severity"]["major"] == 1

    def test_over_time(self, client: TestClient, developer_headers: dict, sample_defect: Defect):
        # Act
        response = client.get("/api/v1/metrics/over-time", headers=developer_headers)

        # Assert
        data = response.json()
        assert response.status_code == 200
        assert len(data["types"]) == 5
        assert sum(row["functional"] for row in data["data"]) == 1


class TestHealthRoutes:

    def test_root(self, client: TestClient):
        # Act
        response = client.get("/")

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, client: TestClient):
        # Act
        response = client.get("/health")

        # Assert
        assert response.json()["checks"]["database"] == "healthy"

    def test_ready(self, client: TestClient):
        assert client.get("/ready").json() == {"status": "ready"}
