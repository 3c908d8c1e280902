"""Bounded recovery around a single activity.

A protected activity goes through three strictly ordered phases: a page
health pre-check, the activity body, and a domain post-check. An invalid
page gets at most one recovery redirect; nothing is retried and no error
leaves ``RecoveryProtocol.run``.
"""

from collections.abc import Awaitable, Callable, Sequence

from playwright.async_api import Page

from core.constants import (
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_PAGE_READY_TIMEOUT_MS,
)
from core.log import get_logger
from core.models.domain.page import ActivityOutcome, PageCheckResult
from core.validation.page_validator import PageValidator

logger = get_logger(__name__)

ActivityBody = Callable[[Page], Awaitable[None]]


async def wait_for_page_ready(page: Page, timeout_ms: int) -> bool:
    """Wait until the page reports its load state, bounded by ``timeout_ms``.

    Returns:
        True if the page became ready in time, False otherwise
    """
    try:
        await page.wait_for_load_state("load", timeout=timeout_ms)
        return True
    except Exception as e:
        logger.debug(f"Page not ready after {timeout_ms}ms: {e}")
        return False


class RecoveryProtocol:
    """Guards one activity's interaction with a page."""

    def __init__(
        self,
        base_url: str,
        allowed_domains: Sequence[str],
        validator: PageValidator | None = None,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        page_ready_timeout_ms: int = DEFAULT_PAGE_READY_TIMEOUT_MS,
    ) -> None:
        """Initialize the protocol.

        Args:
            base_url: Canonical rewards page used as the recovery target
            allowed_domains: Domain substrings an activity may end up on
            validator: Page validator (a default one is created if omitted)
            navigation_timeout_ms: Timeout of the recovery navigation
            page_ready_timeout_ms: Timeout of the post-navigation ready wait
        """
        self.base_url = base_url
        self.allowed_domains = list(allowed_domains)
        self.validator = validator or PageValidator()
        self.navigation_timeout_ms = navigation_timeout_ms
        self.page_ready_timeout_ms = page_ready_timeout_ms

    async def run(
        self,
        page: Page,
        body: ActivityBody,
        *,
        name: str = "activity",
        close_on_invalid: bool = False,
    ) -> ActivityOutcome:
        """Run ``body`` against ``page`` behind the pre- and post-checks.

        Args:
            page: Page the activity acts on
            body: The activity itself
            name: Label used in log messages
            close_on_invalid: Close an invalid page instead of redirecting it

        Returns:
            The activity outcome; never raises
        """
        check = await self.validator.check_page_health(page)
        if check.invalid:
            return await self._handle_invalid(page, check, name, close_on_invalid)

        try:
            await body(page)
        except Exception as e:
            logger.error(f"[{name}] Activity failed: {e}", exc_info=True)
            return ActivityOutcome.failed(str(e) or type(e).__name__)

        return self._check_domain(page, name)

    async def _handle_invalid(
        self,
        page: Page,
        check: PageCheckResult,
        name: str,
        close_on_invalid: bool,
    ) -> ActivityOutcome:
        reason = check.reason or "invalid page"
        logger.warning(f"[{name}] Invalid page detected: {reason}")

        if close_on_invalid:
            try:
                await page.close()
            except Exception as e:
                logger.debug(f"[{name}] Ignoring error while closing page: {e}")
            return ActivityOutcome.skipped_invalid_page(reason)

        await self.redirect_to_base(page, name)
        return ActivityOutcome.redirected_and_aborted(reason)

    async def redirect_to_base(self, page: Page, name: str = "activity") -> bool:
        """Single recovery attempt: navigate back to the rewards base URL.

        Returns:
            True if the navigation itself succeeded
        """
        logger.info(f"[{name}] Redirecting to {self.base_url}")
        try:
            await page.goto(
                self.base_url,
                wait_until="domcontentloaded",
                timeout=self.navigation_timeout_ms,
            )
        except Exception as e:
            logger.error(f"[{name}] Failed to redirect to {self.base_url}: {e}")
            return False

        await wait_for_page_ready(page, self.page_ready_timeout_ms)
        return True

    def _check_domain(self, page: Page, name: str) -> ActivityOutcome:
        try:
            url = page.url or ""
        except Exception as e:
            logger.warning(f"[{name}] Could not read URL after activity: {e}")
            url = ""

        if self.validator.is_on_expected_domain(url, self.allowed_domains):
            return ActivityOutcome.completed()

        logger.warning(f"[{name}] Unexpected domain after activity: {url}")
        return ActivityOutcome.domain_mismatch(url)
