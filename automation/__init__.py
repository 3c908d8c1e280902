"""Supervised automation process launched by the execution controller."""

from .runner import AutomationRunner

__all__ = ["AutomationRunner"]
