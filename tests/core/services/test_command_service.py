"""Tests for remote command dispatch."""

from datetime import UTC, datetime

import pytest

from core.controller.execution_controller import ExecutionController
from core.exceptions import AccountLoadError
from core.models.domain.account import Account
from core.models.domain.schedule import ScheduleConfig
from core.scheduler.coordinator import ScheduleCoordinator
from core.services.command_service import (
    COMMAND_DESCRIPTIONS,
    PERMISSION_DENIED,
    CommandService,
)
from core.types import CommandName

from tests.helpers import FakeLauncher

NOW = datetime(2025, 1, 15, 7, 0, tzinfo=UTC)

ACCOUNTS = [
    Account(email="alice@example.com"),
    Account(email="bob@example.com", enabled=False),
]


def make_service(
    controller: ExecutionController,
    scheduler: ScheduleCoordinator | None = None,
    accounts: list[Account] | None = None,
    allowed_user_ids: tuple[str, ...] = ("42",),
    allow_all_users: bool = False,
    account_error: Exception | None = None,
) -> CommandService:
    def load() -> list[Account]:
        if account_error is not None:
            raise account_error
        return ACCOUNTS if accounts is None else accounts

    return CommandService(
        controller=controller,
        scheduler=scheduler,
        account_loader=load,
        allowed_user_ids=allowed_user_ids,
        allow_all_users=allow_all_users,
        clock=lambda: NOW,
    )


class TestPermissions:
    """Test the allow-list."""

    def test_listed_user(self, controller: ExecutionController) -> None:
        service = make_service(controller)
        assert service.has_permission("42") is True
        assert service.has_permission("43") is False
        assert service.has_permission(None) is False

    def test_empty_list_denies_by_default(self, controller: ExecutionController) -> None:
        service = make_service(controller, allowed_user_ids=())
        assert service.has_permission("42") is False

    def test_empty_list_with_opt_in(self, controller: ExecutionController) -> None:
        service = make_service(controller, allowed_user_ids=(), allow_all_users=True)
        assert service.has_permission("anyone") is True
        assert service.has_permission(None) is True

    def test_list_wins_over_opt_in(self, controller: ExecutionController) -> None:
        service = make_service(controller, allow_all_users=True)
        assert service.has_permission("7") is False

    @pytest.mark.asyncio
    async def test_denied_user_changes_nothing(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        service = make_service(controller)

        reply = await service.dispatch(CommandName.RUN, "13")

        assert reply.success is False
        assert reply.message == PERMISSION_DENIED
        assert reply.ephemeral is True
        assert fake_launcher.handles == []


class TestRunAndStop:
    """Test the run, stop and restart commands."""

    @pytest.mark.asyncio
    async def test_run(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        reply = await make_service(controller).dispatch(CommandName.RUN, "42")

        assert reply.success is True
        assert reply.title == "Run started"
        assert len(fake_launcher.handles) == 1

    @pytest.mark.asyncio
    async def test_run_when_running(self, controller: ExecutionController) -> None:
        await controller.start()

        reply = await make_service(controller).dispatch(CommandName.RUN, "42")

        assert reply.success is False
        assert reply.title == "Already running"

    @pytest.mark.asyncio
    async def test_run_launch_failure(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        fake_launcher.error = OSError("runner missing")

        reply = await make_service(controller).dispatch(CommandName.RUN, "42")

        assert reply.success is False
        assert reply.title == "Failed to start"
        assert reply.message == "runner missing"

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, controller: ExecutionController) -> None:
        reply = await make_service(controller).dispatch(CommandName.STOP, "42")

        assert reply.success is False
        assert reply.title == "Not running"

    @pytest.mark.asyncio
    async def test_stop(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        await controller.start()

        reply = await make_service(controller).dispatch(CommandName.STOP, "42")

        assert reply.success is True
        assert fake_launcher.last_handle.stop_requests == 1

    @pytest.mark.asyncio
    async def test_restart(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        await controller.start()

        reply = await make_service(controller).dispatch(CommandName.RESTART, "42")

        assert reply.success is True
        assert len(fake_launcher.handles) == 2


class TestQueries:
    """Test the read-only commands."""

    @pytest.mark.asyncio
    async def test_status_idle(self, controller: ExecutionController) -> None:
        reply = await make_service(controller).dispatch(CommandName.STATUS, "42")

        assert reply.fields["Status"] == "Idle"
        assert reply.fields["PID"] == "N/A"
        assert "Uptime" not in reply.fields

    @pytest.mark.asyncio
    async def test_status_running(self, fake_launcher: FakeLauncher) -> None:
        controller = ExecutionController(
            launcher=fake_launcher,
            command=["runner"],
            clock=lambda: datetime(2025, 1, 15, 6, 58, 55, tzinfo=UTC),
        )
        await controller.start()

        reply = await make_service(controller).dispatch(CommandName.STATUS, "42")

        assert reply.fields["Status"] == "Running"
        assert reply.fields["PID"] == "1000"
        assert reply.fields["Uptime"] == "1m 5s"

    @pytest.mark.asyncio
    async def test_status_shows_last_error(
        self, controller: ExecutionController, fake_launcher: FakeLauncher
    ) -> None:
        await controller.start()
        fake_launcher.last_handle.exit(2)
        await controller.wait_until_idle(1.0)

        reply = await make_service(controller).dispatch(CommandName.STATUS, "42")

        assert reply.fields["Last error"] == "automation process exited with code 2"

    @pytest.mark.asyncio
    async def test_accounts(self, controller: ExecutionController) -> None:
        reply = await make_service(controller).dispatch(CommandName.ACCOUNTS, "42")

        assert reply.success is True
        assert reply.ephemeral is True
        assert "al***@example.com" in reply.message
        assert "bo***@example.com (disabled)" in reply.message
        assert "alice@example.com" not in reply.message
        assert reply.fields["Total"] == "2 account(s)"

    @pytest.mark.asyncio
    async def test_no_accounts(self, controller: ExecutionController) -> None:
        service = make_service(controller, accounts=[])

        reply = await service.dispatch(CommandName.ACCOUNTS, "42")

        assert reply.message == "No accounts configured."

    @pytest.mark.asyncio
    async def test_accounts_load_error(self, controller: ExecutionController) -> None:
        error = AccountLoadError("accounts.json", "file not found")
        service = make_service(controller, account_error=error)

        reply = await service.dispatch(CommandName.ACCOUNTS, "42")

        assert reply.success is False
        assert reply.message == str(error)

    @pytest.mark.asyncio
    async def test_handler_errors_are_reported(
        self, controller: ExecutionController
    ) -> None:
        service = make_service(controller, account_error=RuntimeError("disk gone"))

        reply = await service.dispatch(CommandName.ACCOUNTS, "42")

        assert reply.success is False
        assert reply.title == "Error"
        assert reply.message == "disk gone"

    @pytest.mark.asyncio
    async def test_schedule_disabled(self, controller: ExecutionController) -> None:
        reply = await make_service(controller).dispatch(CommandName.SCHEDULE, "42")

        assert reply.message == "Scheduler is not enabled in configuration."

    @pytest.mark.asyncio
    async def test_schedule(self, controller: ExecutionController) -> None:
        scheduler = ScheduleCoordinator(
            controller,
            ScheduleConfig(enabled=True, interval_minutes=30),
            clock=lambda: NOW,
        )
        scheduler.activate()

        reply = await make_service(controller, scheduler=scheduler).dispatch(
            CommandName.SCHEDULE, "42"
        )

        assert reply.fields["Status"] == "Active"
        assert reply.fields["Currently running"] == "No"
        assert reply.fields["Next run"] == "2025-01-15T07:30:00+00:00"
        assert reply.fields["Last run"] == "Never"

    @pytest.mark.asyncio
    async def test_help_lists_every_command(
        self, controller: ExecutionController
    ) -> None:
        reply = await make_service(controller).dispatch(CommandName.HELP, "42")

        for name in CommandName:
            assert f"/{name.value} - {COMMAND_DESCRIPTIONS[name]}" in reply.message
