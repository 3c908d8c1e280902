"""Core services package."""

from .command_service import COMMAND_DESCRIPTIONS, CommandReply, CommandService

__all__ = [
    "COMMAND_DESCRIPTIONS",
    "CommandReply",
    "CommandService",
]
