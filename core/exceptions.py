"""Exceptions raised by the rewardpilot core."""


class RewardPilotError(Exception):
    """Base exception for rewardpilot errors."""


class AccountLoadError(RewardPilotError):
    """Raised when the accounts file is missing or malformed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Failed to load accounts from {path}: {message}")


class ProcessLaunchError(RewardPilotError):
    """Raised by a launcher when the supervised process cannot be started."""
