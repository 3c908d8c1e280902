"""API routers package."""

from .accounts import router as accounts_router
from .commands import router as commands_router
from .common import router as common_router
from .run import router as run_router
from .schedule import router as schedule_router

__all__ = [
    "accounts_router",
    "commands_router",
    "common_router",
    "run_router",
    "schedule_router",
]
