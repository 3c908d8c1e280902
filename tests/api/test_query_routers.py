"""Tests for the schedule and account endpoints."""

from collections.abc import Callable

from fastapi.testclient import TestClient

from core.models.domain.schedule import ScheduleConfig


def test_schedule_disabled(client: TestClient) -> None:
    response = client.get("/v1/schedule")

    assert response.status_code == 200
    assert response.json() == {
        "active": False,
        "is_running": False,
        "next_run": None,
        "last_run": None,
    }


def test_schedule_enabled(make_client: Callable[..., TestClient]) -> None:
    client = make_client(
        schedule=ScheduleConfig(
            enabled=True, interval_minutes=60, tick_interval_seconds=3600
        )
    )

    data = client.get("/v1/schedule").json()

    assert data["active"] is True
    assert data["next_run"] is not None
    assert data["last_run"] is None


def test_schedule_mirrors_running(client: TestClient) -> None:
    client.put("/v1/run")

    assert client.get("/v1/schedule").json()["is_running"] is True


def test_accounts_are_redacted(client: TestClient) -> None:
    response = client.get("/v1/accounts")

    assert response.status_code == 200
    assert response.json() == {
        "accounts": [
            {"email": "al***@example.com", "enabled": True},
            {"email": "bo***@example.com", "enabled": False},
        ],
        "count": 2,
    }
    assert "pw" not in response.text


def test_missing_accounts_file(make_client: Callable[..., TestClient], tmp_path) -> None:
    path = tmp_path / "nowhere.json"
    client = make_client(accounts_path=str(path))

    response = client.get("/v1/accounts")

    assert response.status_code == 503
    assert response.json()["detail"] == (
        f"Failed to load accounts from {path}: file not found"
    )
