from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from rubrik_stats.core.config import settings
from rubrik_stats.core.dependencies import get_stats_service, verify_api_token
from rubrik_stats.core.exceptions import AuthenticationError
from rubrik_stats.main import app
from rubrik_stats.schemas.stats import (
    ArchivalBandwidth,
    DataLocationUsage,
    StatsSnapshot,
    SystemStorage,
    TimeStat,
    VmStorage,
)
from rubrik_stats.services.stats_service import StatsService


class TestApiEndpoints:
    @pytest.fixture
    def mock_stats_service(self):
        return MagicMock(spec=StatsService)

    @pytest.fixture
    def client(self, mock_stats_service):
        app.dependency_overrides[get_stats_service] = lambda: mock_stats_service
        app.dependency_overrides[verify_api_token] = lambda: True

        with TestClient(app) as c:
            yield c

        app.dependency_overrides = {}

    def test_system_storage(self, client, mock_stats_service):
        mock_stats_service.get_system_storage.return_value = SystemStorage(total=100, used=40, live_mount=3)

        response = client.get("/api/v1/stats/system_storage")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 100
        assert data["used"] == 40
        assert data["liveMount"] == 3

    def test_per_vm_storage(self, client, mock_stats_service):
        mock_stats_service.get_per_vm_storage.return_value = [VmStorage(id="vm-1", logical_bytes=12.5)]

        response = client.get("/api/v1/stats/per_vm_storage")

        assert response.status_code == 200
        assert response.json()[0]["id"] == "vm-1"
        assert response.json()[0]["logicalBytes"] == 12.5

    def test_stream_count(self, client, mock_stats_service):
        mock_stats_service.get_stream_count.return_value = 42

        response = client.get("/api/v1/stats/streams/count")

        assert response.status_code == 200
        assert response.json() == {"count": 42}

    def test_data_location_usage(self, client, mock_stats_service):
        mock_stats_service.get_data_location_usage.return_value = [
            DataLocationUsage(location_id="loc1", data_archived=5)
        ]

        response = client.get("/api/v1/stats/data_location/usage")

        assert response.status_code == 200
        assert response.json()[0]["locationId"] == "loc1"
        assert response.json()[0]["dataArchived"] == 5

    def test_physical_ingest(self, client, mock_stats_service):
        mock_stats_service.get_physical_ingest.return_value = [TimeStat(time="t0", stat=1)]

        response = client.get("/api/v1/stats/physical_ingest")

        assert response.status_code == 200
        assert response.json() == [{"time": "t0", "stat": 1.0}]

    def test_archival_bandwidth_with_range(self, client, mock_stats_service):
        mock_stats_service.get_archival_bandwidth.return_value = []

        response = client.get("/api/v1/stats/archival/bandwidth/loc1?range=-30min")

        assert response.status_code == 200
        mock_stats_service.get_archival_bandwidth.assert_called_once_with("loc1", "-30min")

    def test_archival_bandwidth_default_range(self, client, mock_stats_service):
        mock_stats_service.get_archival_bandwidth.return_value = []

        client.get("/api/v1/stats/archival/bandwidth/loc1")

        mock_stats_service.get_archival_bandwidth.assert_called_once_with("loc1", "")

    def test_runway_remaining(self, client, mock_stats_service):
        mock_stats_service.get_runway_remaining.return_value = 120

        response = client.get("/api/v1/stats/runway_remaining")

        assert response.json() == {"days": 120}

    def test_average_storage_growth(self, client, mock_stats_service):
        mock_stats_service.get_average_storage_growth_per_day.return_value = 2048

        response = client.get("/api/v1/stats/average_storage_growth_per_day")

        assert response.json() == {"bytes": 2048}

    def test_snapshot(self, client, mock_stats_service):
        mock_stats_service.get_snapshot.return_value = StatsSnapshot(
            stream_count=3,
            runway_remaining_days=7,
            system_storage=SystemStorage(live_mount=4),
            archival_bandwidth=[ArchivalBandwidth(location_id="loc1", series=[TimeStat(time="t0", stat=2)])],
        )

        response = client.get("/api/v1/stats/snapshot?range=-2h")

        assert response.status_code == 200
        data = response.json()
        assert data["streamCount"] == 3
        assert data["runwayRemainingDays"] == 7
        assert data["systemStorage"]["liveMount"] == 4
        assert data["archivalBandwidth"][0]["locationId"] == "loc1"
        assert "stream_count" not in data
        mock_stats_service.get_snapshot.assert_called_once_with("-2h")

    def test_upstream_login_failure(self, client):
        def failing_service():
            raise AuthenticationError("Login rejected with HTTP 401")

        app.dependency_overrides[get_stats_service] = failing_service

        response = client.get("/api/v1/stats/system_storage")

        assert response.status_code == 502
        assert response.json()["title"] == "Rubrik Authentication Failed"


class TestApiToken:
    @pytest.fixture
    def client(self):
        mock_service = MagicMock(spec=StatsService)
        mock_service.get_stream_count.return_value = 1
        app.dependency_overrides[get_stats_service] = lambda: mock_service

        with TestClient(app) as c:
            yield c

        app.dependency_overrides = {}

    def test_valid_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "API_SECRET_TOKEN", "secret")

        response = client.get("/api/v1/stats/streams/count", headers={"x-api-token": "secret"})

        assert response.status_code == 200

    def test_wrong_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "API_SECRET_TOKEN", "secret")

        response = client.get("/api/v1/stats/streams/count", headers={"x-api-token": "nope"})

        assert response.status_code == 401

    def test_missing_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "API_SECRET_TOKEN", "secret")

        response = client.get("/api/v1/stats/streams/count")

        assert response.status_code in (401, 403)

    def test_unset_secret_rejects_everything(self, client, monkeypatch):
        monkeypatch.setattr(settings, "API_SECRET_TOKEN", "")

        response = client.get("/api/v1/stats/streams/count", headers={"x-api-token": "anything"})

        assert response.status_code == 401
