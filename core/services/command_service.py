"""Remote command dispatch for controlling the automation."""

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Final

from pydantic import BaseModel, Field

from core.constants import ALREADY_RUNNING
from core.controller.execution_controller import ExecutionController, utc_now
from core.exceptions import AccountLoadError
from core.log import get_logger
from core.models.domain.account import Account
from core.scheduler.coordinator import ScheduleCoordinator
from core.types import CommandName
from core.utils import format_timestamp, format_uptime

logger = get_logger(__name__)

COMMAND_DESCRIPTIONS: Final[dict[CommandName, str]] = {
    CommandName.RUN: "Trigger an immediate automation run",
    CommandName.STATUS: "Show run status (running/idle, uptime, scheduler)",
    CommandName.ACCOUNTS: "List configured accounts (emails redacted)",
    CommandName.STOP: "Stop the current automation run",
    CommandName.RESTART: "Restart the automation run",
    CommandName.SCHEDULE: "Show next scheduled run time",
    CommandName.HELP: "Show all available commands",
}

PERMISSION_DENIED: Final[str] = "You do not have permission to use this bot."


class CommandReply(BaseModel):
    """What a command surface should render for one command."""

    command: CommandName
    success: bool = True
    title: str
    message: str = ""
    fields: dict[str, str] = Field(default_factory=dict)
    ephemeral: bool = False


CommandHandler = Callable[[], Awaitable[CommandReply]]


class CommandService:
    """Maps command names to handlers over the controller and scheduler."""

    def __init__(
        self,
        controller: ExecutionController,
        scheduler: ScheduleCoordinator | None,
        account_loader: Callable[[], list[Account]],
        allowed_user_ids: Sequence[str] = (),
        allow_all_users: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.controller = controller
        self.scheduler = scheduler
        self.account_loader = account_loader
        self.allowed_user_ids = {str(user_id) for user_id in allowed_user_ids}
        self.allow_all_users = allow_all_users
        self.clock = clock

        self._handlers: dict[CommandName, CommandHandler] = {
            CommandName.RUN: self._handle_run,
            CommandName.STATUS: self._handle_status,
            CommandName.ACCOUNTS: self._handle_accounts,
            CommandName.STOP: self._handle_stop,
            CommandName.RESTART: self._handle_restart,
            CommandName.SCHEDULE: self._handle_schedule,
            CommandName.HELP: self._handle_help,
        }

        if not self.allowed_user_ids and not allow_all_users:
            logger.warning("No allowed user ids configured; all commands are denied")

    def has_permission(self, user_id: str | None) -> bool:
        """Whether ``user_id`` may control the automation.

        An empty allow-list denies everyone unless ``allow_all_users`` is set.
        """
        if not self.allowed_user_ids:
            return self.allow_all_users
        return user_id is not None and str(user_id) in self.allowed_user_ids

    async def dispatch(self, command: CommandName, user_id: str | None) -> CommandReply:
        """Run ``command`` on behalf of ``user_id``."""
        if not self.has_permission(user_id):
            logger.warning(f"Denied command '{command.value}' for user {user_id}")
            return CommandReply(
                command=command,
                success=False,
                title="Permission denied",
                message=PERMISSION_DENIED,
                ephemeral=True,
            )

        handler = self._handlers[command]
        try:
            return await handler()
        except Exception as e:
            logger.error(f"Command error ({command.value}): {e}", exc_info=True)
            return CommandReply(
                command=command,
                success=False,
                title="Error",
                message=str(e),
                ephemeral=True,
            )

    async def _handle_run(self) -> CommandReply:
        if self.controller.get_status().running:
            return CommandReply(
                command=CommandName.RUN,
                success=False,
                title="Already running",
                message="The automation is currently running. Use stop first "
                "if you want to restart.",
                ephemeral=True,
            )

        result = await self.controller.start()
        if result.success:
            return CommandReply(
                command=CommandName.RUN,
                title="Run started",
                message="The automation has been triggered. Use status to "
                "monitor progress.",
            )
        already_running = result.error == ALREADY_RUNNING
        return CommandReply(
            command=CommandName.RUN,
            success=False,
            title="Already running" if already_running else "Failed to start",
            message=result.error or "Unknown error",
        )

    async def _handle_status(self) -> CommandReply:
        status = self.controller.get_status()
        fields = {
            "Status": "Running" if status.running else "Idle",
            "PID": str(status.process_id or "N/A"),
        }

        uptime = status.uptime_ms(self.clock())
        if uptime is not None:
            fields["Uptime"] = format_uptime(uptime)
        if status.started_at is not None:
            fields["Started"] = format_timestamp(status.started_at)
        if status.error_message:
            fields["Last error"] = status.error_message

        if self.scheduler is not None:
            schedule = self.scheduler.get_status()
            fields["Scheduler"] = "Active" if schedule.active else "Inactive"
            if schedule.next_run is not None:
                fields["Next run"] = format_timestamp(schedule.next_run)
            if schedule.last_run is not None:
                fields["Last run"] = format_timestamp(schedule.last_run)

        return CommandReply(command=CommandName.STATUS, title="Status", fields=fields)

    async def _handle_accounts(self) -> CommandReply:
        try:
            accounts = self.account_loader()
        except AccountLoadError as e:
            return CommandReply(
                command=CommandName.ACCOUNTS,
                success=False,
                title="Error",
                message=str(e),
                ephemeral=True,
            )

        if not accounts:
            return CommandReply(
                command=CommandName.ACCOUNTS,
                title="Accounts",
                message="No accounts configured.",
                ephemeral=True,
            )

        listing = "\n".join(
            f"{index}. {account.redacted_email}"
            + ("" if account.enabled else " (disabled)")
            for index, account in enumerate(accounts, start=1)
        )
        return CommandReply(
            command=CommandName.ACCOUNTS,
            title="Configured accounts",
            message=listing,
            fields={"Total": f"{len(accounts)} account(s)"},
            ephemeral=True,
        )

    async def _handle_stop(self) -> CommandReply:
        if not self.controller.get_status().running:
            return CommandReply(
                command=CommandName.STOP,
                success=False,
                title="Not running",
                message="The automation is not currently running.",
                ephemeral=True,
            )

        result = self.controller.stop()
        if result.success:
            return CommandReply(
                command=CommandName.STOP,
                title="Stopping",
                message="The automation will complete its current task and then stop.",
            )
        return CommandReply(
            command=CommandName.STOP,
            success=False,
            title="Failed to stop",
            message=result.error or "Unknown error",
        )

    async def _handle_restart(self) -> CommandReply:
        result = await self.controller.restart()
        if result.success:
            return CommandReply(
                command=CommandName.RESTART,
                title="Restarted",
                message="The automation has been restarted.",
            )
        return CommandReply(
            command=CommandName.RESTART,
            success=False,
            title="Failed to restart",
            message=result.error or "Unknown error",
        )

    async def _handle_schedule(self) -> CommandReply:
        if self.scheduler is None:
            return CommandReply(
                command=CommandName.SCHEDULE,
                title="Scheduler",
                message="Scheduler is not enabled in configuration.",
                ephemeral=True,
            )

        status = self.scheduler.get_status()
        return CommandReply(
            command=CommandName.SCHEDULE,
            title="Scheduler",
            fields={
                "Status": "Active" if status.active else "Inactive",
                "Currently running": "Yes" if status.is_running else "No",
                "Next run": format_timestamp(status.next_run),
                "Last run": format_timestamp(status.last_run, default="Never"),
            },
        )

    async def _handle_help(self) -> CommandReply:
        listing = "\n".join(
            f"/{name.value} - {description}"
            for name, description in COMMAND_DESCRIPTIONS.items()
        )
        return CommandReply(
            command=CommandName.HELP, title="Available commands", message=listing
        )
