"""Unified models package for rewardpilot system."""

from core.models.api.responses import (
    AccountListResponse,
    AccountSummary,
    AuthError,
    HealthResponse,
    RunStatusResponse,
    ScheduleStatusResponse,
)
from core.models.domain.account import Account
from core.models.domain.page import ActivityOutcome, PageCheckResult, RunSummary
from core.models.domain.run import OperationResult, RunStatus
from core.models.domain.schedule import ScheduleConfig, ScheduleStatus
from core.models.domain.task import TaskManagerStatus, TaskStats

__all__ = [
    # Domain models
    "Account",
    "ActivityOutcome",
    "OperationResult",
    "PageCheckResult",
    "RunStatus",
    "RunSummary",
    "ScheduleConfig",
    "ScheduleStatus",
    "TaskManagerStatus",
    "TaskStats",
    # API models
    "AccountListResponse",
    "AccountSummary",
    "AuthError",
    "HealthResponse",
    "RunStatusResponse",
    "ScheduleStatusResponse",
]
