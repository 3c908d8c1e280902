"""FastAPI dependencies resolving services from app state."""

from fastapi import HTTPException, Request, status

from core.config import Settings
from core.controller.execution_controller import ExecutionController
from core.scheduler.coordinator import ScheduleCoordinator
from core.services.command_service import CommandService


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_controller(request: Request) -> ExecutionController:
    """Get the execution controller from app state."""
    controller: ExecutionController | None = getattr(
        request.app.state, "controller", None
    )
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Execution controller is not initialized",
        )
    return controller


def get_scheduler(request: Request) -> ScheduleCoordinator | None:
    """Get the schedule coordinator, if scheduling is configured."""
    scheduler: ScheduleCoordinator | None = getattr(
        request.app.state, "scheduler", None
    )
    return scheduler


def get_command_service(request: Request) -> CommandService:
    """Get the command service from app state."""
    service: CommandService | None = getattr(request.app.state, "command_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Command service is not initialized",
        )
    return service
