"""Application service initializer for managing startup and shutdown."""

from collections.abc import Callable
from functools import partial

from fastapi import FastAPI

from core.accounts import load_accounts
from core.config import Settings
from core.controller.execution_controller import ExecutionController
from core.controller.launcher import ProcessLauncher, SubprocessLauncher
from core.log import get_logger
from core.models.domain.account import Account
from core.scheduler.coordinator import ScheduleCoordinator
from core.services.command_service import CommandService

logger = get_logger(__name__)


class AppServiceInitializer:
    """Builds the control-plane services and wires them into app.state."""

    def __init__(self, settings: Settings):
        """Initialize with application settings."""
        self.settings = settings
        self.controller: ExecutionController | None = None
        self.scheduler: ScheduleCoordinator | None = None
        self.command_service: CommandService | None = None

    async def initialize_all_services(
        self,
        app: FastAPI,
        launcher: ProcessLauncher | None = None,
        account_loader: Callable[[], list[Account]] | None = None,
    ) -> None:
        """Initialize all services and configure app.state."""
        logger.info("Initializing all application services...")

        self.initialize_controller(launcher)
        self.initialize_scheduler()
        self.initialize_command_service(account_loader)
        self._setup_app_state(app)

        logger.info("All application services initialized successfully")

    def initialize_controller(self, launcher: ProcessLauncher | None = None) -> None:
        """Create the execution controller."""
        self.controller = ExecutionController(
            launcher=launcher or SubprocessLauncher(),
            command=self.settings.runner_command,
            restart_timeout_seconds=self.settings.restart_timeout_seconds,
        )

    def initialize_scheduler(self) -> None:
        """Create the schedule coordinator on top of the controller."""
        if not self.controller:
            raise RuntimeError("Controller must be initialized before the scheduler")

        if not self.settings.schedule.enabled:
            logger.warning("Scheduled runs are disabled")
        self.scheduler = ScheduleCoordinator(self.controller, self.settings.schedule)

    def initialize_command_service(
        self, account_loader: Callable[[], list[Account]] | None = None
    ) -> None:
        """Create the remote command dispatcher."""
        if not self.controller:
            raise RuntimeError(
                "Controller must be initialized before the command service"
            )

        self.command_service = CommandService(
            controller=self.controller,
            scheduler=self.scheduler if self.settings.schedule.enabled else None,
            account_loader=account_loader
            or partial(load_accounts, self.settings.accounts_path),
            allowed_user_ids=self.settings.allowed_user_ids,
            allow_all_users=self.settings.allow_all_users,
        )

    async def start_all_services(self) -> None:
        """Start background services."""
        if self.scheduler:
            await self.scheduler.start()

    async def stop_all_services(self) -> None:
        """Stop the scheduler and ask a running automation to wind down."""
        logger.info("Stopping all background services...")

        if self.scheduler:
            await self.scheduler.stop()

        if self.controller and self.controller.get_status().running:
            result = self.controller.stop()
            if result.success and not await self.controller.wait_until_idle(
                self.settings.restart_timeout_seconds
            ):
                logger.error("Automation run did not stop before shutdown")

        logger.info("All background services stopped")

    def _setup_app_state(self, app: FastAPI) -> None:
        """Configure app.state with initialized services."""
        app.state.controller = self.controller
        app.state.scheduler = self.scheduler
        app.state.command_service = self.command_service
        app.state.services = self
