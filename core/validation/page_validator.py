"""Health and activity-readiness classification of browser pages.

Checks are ordered cheapest first: URL string checks, then content
retrieval, then DOM parsing, then a text scan. Nothing here raises; a
failure to classify is reported as an invalid page.
"""

from collections.abc import Iterable, Sequence

from bs4 import BeautifulSoup
from playwright.async_api import Page

from core.constants import (
    ACTIVITY_SELECTORS,
    ASYNC_PROBE_SELECTOR_COUNT,
    BLANK_PAGE_URLS,
    BROWSER_ERROR_URL_PREFIXES,
    DEFAULT_PROBE_TIMEOUT_MS,
    HTTP_ERROR_SIGNATURES,
    MIN_PAGE_CONTENT_LENGTH,
    NETWORK_ERROR_BODY_SELECTOR,
)
from core.log import get_logger
from core.models.domain.page import PageCheckResult

logger = get_logger(__name__)


def is_on_expected_domain(url: str, allowlist: Iterable[str]) -> bool:
    """Whether ``url`` contains any of the allow-listed domain substrings."""
    return any(domain in url for domain in allowlist)


def find_error_signature(html: str, body_text: str) -> str | None:
    """First known HTTP/network error signature found in markup or text."""
    for signature in HTTP_ERROR_SIGNATURES:
        if signature in html or signature in body_text:
            return signature
    return None


class PageValidator:
    """Stateless classifier of a page's health and activity readiness."""

    def __init__(
        self,
        probe_timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
        activity_selectors: Sequence[str] = ACTIVITY_SELECTORS,
        probe_selector_count: int = ASYNC_PROBE_SELECTOR_COUNT,
    ) -> None:
        self.probe_timeout_ms = probe_timeout_ms
        self.activity_selectors = tuple(activity_selectors)
        self.probe_selectors = self.activity_selectors[:probe_selector_count]

    async def check_page_health(self, page: Page) -> PageCheckResult:
        """Classify whether ``page`` is usable.

        Returns:
            ``PageCheckResult`` with ``invalid=True`` and a reason for blank
            pages, browser error pages, degenerate content, network error
            documents and known HTTP error banners.
        """
        try:
            url = page.url or ""
        except Exception as e:
            return PageCheckResult.invalid_because(f"page check failed: {e}")

        if url in BLANK_PAGE_URLS:
            return PageCheckResult.invalid_because("blank page")

        if url.startswith(BROWSER_ERROR_URL_PREFIXES):
            return PageCheckResult.invalid_because("browser error page")

        try:
            html = await page.content()
        except Exception as e:
            return PageCheckResult.invalid_because(f"page check failed: {e}")

        try:
            return self._classify_content(html)
        except Exception as e:
            return PageCheckResult.invalid_because(f"page check failed: {e}")

    def _classify_content(self, html: str | None) -> PageCheckResult:
        if not html or len(html) < MIN_PAGE_CONTENT_LENGTH:
            return PageCheckResult.invalid_because("empty page content")

        soup = BeautifulSoup(html, "html.parser")
        if soup.select_one(NETWORK_ERROR_BODY_SELECTOR) is not None:
            return PageCheckResult.invalid_because("network error")

        body = soup.body
        body_text = body.get_text() if body is not None else ""
        signature = find_error_signature(html, body_text)
        if signature:
            return PageCheckResult.invalid_because(f"HTTP/network error: {signature}")

        return PageCheckResult.valid()

    async def has_activity_content(self, page: Page) -> bool:
        """Whether ``page`` shows an interactive activity.

        Static markup is searched first; selectors for elements that render
        late are then probed live, each for at most ``probe_timeout_ms``.
        """
        try:
            html = await page.content()
        except Exception as e:
            logger.debug(f"Could not read page content for activity check: {e}")
            html = ""

        try:
            if html:
                soup = BeautifulSoup(html, "html.parser")
                for selector in self.activity_selectors:
                    if soup.select_one(selector) is not None:
                        return True

            for selector in self.probe_selectors:
                if await self._probe_visible(page, selector):
                    return True
        except Exception as e:
            logger.debug(f"Activity content check failed: {e}")

        return False

    async def _probe_visible(self, page: Page, selector: str) -> bool:
        try:
            await page.locator(selector).first.wait_for(
                state="visible", timeout=self.probe_timeout_ms
            )
            return True
        except Exception:
            return False

    @staticmethod
    def is_on_expected_domain(url: str, allowlist: Iterable[str]) -> bool:
        return is_on_expected_domain(url, allowlist)
