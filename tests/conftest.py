"""Global pytest configuration and fixtures."""

from logging import Logger

import pytest

from core import setup_test_logging
from core.controller.execution_controller import ExecutionController

from tests.helpers import FakeLauncher


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from core import get_logger

    return get_logger("test")


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    """Provide a fake process launcher."""
    return FakeLauncher()


@pytest.fixture
def controller(fake_launcher: FakeLauncher) -> ExecutionController:
    """Execution controller over the fake launcher."""
    return ExecutionController(
        launcher=fake_launcher,
        command=["runner", "--once"],
        restart_timeout_seconds=1.0,
    )
