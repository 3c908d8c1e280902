"""Page validation and bounded recovery."""

from .page_validator import PageValidator, is_on_expected_domain
from .recovery import RecoveryProtocol, wait_for_page_ready

__all__ = [
    "PageValidator",
    "RecoveryProtocol",
    "is_on_expected_domain",
    "wait_for_page_ready",
]
