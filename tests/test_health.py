from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient

from rubrik_stats.core import dependencies
from rubrik_stats.core.exceptions import AuthenticationError
from rubrik_stats.main import app


@pytest.mark.asyncio
async def test_health_check():
    from httpx import ASGITransport

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "app": "up"}


def test_health_check_upstream():
    mock_rubrik = MagicMock()
    mock_rubrik.is_logged_in = False
    with patch("rubrik_stats.main.get_rubrik_client", return_value=mock_rubrik):
        response = TestClient(app).get("/health?check_upstream=true")

    assert response.status_code == 200
    assert response.json()["upstream"] == "connected"
    mock_rubrik.connect.assert_called_once()


def test_health_check_upstream_reuses_logged_in_client():
    mock_rubrik = MagicMock()
    mock_rubrik.is_logged_in = True
    with patch("rubrik_stats.main.get_rubrik_client", return_value=mock_rubrik):
        response = TestClient(app).get("/health?check_upstream=true")

    assert response.status_code == 200
    assert response.json()["upstream"] == "connected"
    mock_rubrik.connect.assert_not_called()


def test_repeated_upstream_checks_keep_one_session(monkeypatch):
    monkeypatch.setattr(dependencies, "_client", None)
    with patch("rubrik_stats.core.client.requests.Session"):
        with patch("rubrik_stats.core.client.AuthService") as MockAuth:
            auth = MockAuth.return_value
            auth.login.side_effect = ["tok-1", "tok-2", "tok-3"]
            client = TestClient(app)

            for _ in range(2):
                assert client.get("/health?check_upstream=true").status_code == 200

            assert auth.login.call_count == 1
            auth.logout.assert_not_called()

            dependencies.close_rubrik_client()
            auth.logout.assert_called_once()
            assert auth.logout.call_args.args[1] == "tok-1"


def test_health_check_upstream_down():
    with patch("rubrik_stats.main.get_rubrik_client", side_effect=AuthenticationError("unreachable")):
        response = TestClient(app).get("/health?check_upstream=true")

    assert response.status_code == 503
    assert response.json()["status"] == 503
    assert "unreachable" in response.json()["detail"]
