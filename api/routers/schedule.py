"""Schedule router."""

from fastapi import APIRouter, Depends

from api.dependencies import get_controller, get_scheduler
from api.literals import SCHEDULE_BASE_PATH
from core.controller.execution_controller import ExecutionController
from core.models import ScheduleStatus, ScheduleStatusResponse
from core.scheduler.coordinator import ScheduleCoordinator

router = APIRouter(prefix=SCHEDULE_BASE_PATH, tags=["schedule"])


@router.get("", response_model=ScheduleStatusResponse)
async def get_schedule_status(
    controller: ExecutionController = Depends(get_controller),
    scheduler: ScheduleCoordinator | None = Depends(get_scheduler),
) -> ScheduleStatusResponse:
    """Next and last scheduled run."""
    if scheduler is None:
        status = ScheduleStatus(
            active=False, is_running=controller.get_status().running
        )
    else:
        status = scheduler.get_status()
    return ScheduleStatusResponse.from_status(status)
