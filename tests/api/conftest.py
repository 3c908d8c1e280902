"""Fixtures for API tests."""

from collections.abc import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.app import create_app
from api.services.app_initializer import AppServiceInitializer
from core import setup_test_logging
from core.config import Settings
from core.types import Environment

from tests.helpers import FakeLauncher


def build_app(settings: Settings, launcher: FakeLauncher) -> FastAPI:
    """App whose services run the fake launcher instead of a real process."""
    app = create_app(settings)
    services = AppServiceInitializer(settings)
    services.initialize_controller(launcher)
    services.initialize_scheduler()
    services.initialize_command_service()
    services._setup_app_state(app)
    return app


@pytest.fixture
def accounts_file(tmp_path) -> str:
    path = tmp_path / "accounts.json"
    path.write_text(
        '[{"email": "alice@example.com", "password": "pw"},'
        ' {"email": "bob@example.com", "enabled": false}]',
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def make_client(
    fake_launcher: FakeLauncher, accounts_file: str
) -> Generator[Callable[..., TestClient], None, None]:
    """Factory of started test clients; settings can be overridden."""
    clients: list[TestClient] = []

    def factory(**overrides) -> TestClient:
        overrides.setdefault("environment", Environment.TESTING)
        overrides.setdefault("accounts_path", accounts_file)
        overrides.setdefault("allowed_user_ids", ["42"])
        client = TestClient(build_app(Settings(**overrides), fake_launcher))
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)
    setup_test_logging()


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
