"""Run control router: start, stop, restart and inspect the automation."""

from fastapi import APIRouter, Depends

from api.dependencies import get_controller
from api.literals import RUN_BASE_PATH
from core.controller.execution_controller import ExecutionController
from core.log import get_logger
from core.models import OperationResult, RunStatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix=RUN_BASE_PATH, tags=["run"])


@router.get("", response_model=RunStatusResponse)
async def get_run_status(
    controller: ExecutionController = Depends(get_controller),
) -> RunStatusResponse:
    """Current run status."""
    return RunStatusResponse.from_status(
        controller.get_status(), controller.state.value, controller.clock()
    )


@router.put("", response_model=OperationResult, response_model_exclude_none=True)
async def start_run(
    controller: ExecutionController = Depends(get_controller),
) -> OperationResult:
    """Start an automation run unless one is already active."""
    result = await controller.start()
    logger.info(f"Start requested via API: success={result.success}")
    return result


@router.delete("", response_model=OperationResult, response_model_exclude_none=True)
async def stop_run(
    controller: ExecutionController = Depends(get_controller),
) -> OperationResult:
    """Ask the current run to stop after its current activity."""
    result = controller.stop()
    logger.info(f"Stop requested via API: success={result.success}")
    return result


@router.post(
    "/restart", response_model=OperationResult, response_model_exclude_none=True
)
async def restart_run(
    controller: ExecutionController = Depends(get_controller),
) -> OperationResult:
    """Stop the current run, wait for it to exit, then start a new one."""
    return await controller.restart()
