"""Core functionality for the rewardpilot system."""

from .config import Settings, load_settings
from .log import (
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .types import CommandName, ControllerState, Environment, OutcomeKind

__all__ = [
    "CommandName",
    "ControllerState",
    "Environment",
    "OutcomeKind",
    "Settings",
    "load_settings",
    "get_logger",
    "setup_logging",
    "setup_production_logging",
    "setup_test_logging",
]
