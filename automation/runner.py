"""Processes enabled accounts across a fixed number of browser clusters."""

import asyncio
import signal
from collections.abc import Sequence

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from automation.activities.url_reward import complete_url_reward
from core.accounts import enabled_accounts
from core.config import Settings
from core.log import get_logger
from core.models.domain.account import Account
from core.models.domain.page import ActivityOutcome, RunSummary
from core.validation.page_validator import PageValidator
from core.validation.recovery import RecoveryProtocol

logger = get_logger(__name__)

STOP_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)
if hasattr(signal, "SIGBREAK"):
    STOP_SIGNALS += (signal.SIGBREAK,)


class AutomationRunner:
    """One automation run.

    Each cluster pulls accounts from a shared queue and owns the browser
    context it opens for the account, so clusters never share pages. A stop
    request lets every cluster finish its current activity, then exit.
    """

    def __init__(
        self,
        settings: Settings,
        accounts: Sequence[Account],
        validator: PageValidator | None = None,
        recovery: RecoveryProtocol | None = None,
    ) -> None:
        self.settings = settings
        self.accounts = enabled_accounts(list(accounts))
        self.validator = validator or PageValidator(
            probe_timeout_ms=settings.probe_timeout_ms
        )
        self.recovery = recovery or RecoveryProtocol(
            base_url=settings.base_url,
            allowed_domains=settings.allowed_domains,
            validator=self.validator,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            page_ready_timeout_ms=settings.page_ready_timeout_ms,
        )
        self.summary = RunSummary()
        self._stop_event = asyncio.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        if not self._stop_event.is_set():
            logger.info("Stop requested, finishing the current activity")
            self._stop_event.set()

    async def run(self) -> RunSummary:
        """Launch the browser and process every enabled account."""
        if not self.accounts:
            logger.warning("No enabled accounts configured, nothing to do")
            return self.summary

        self._install_signal_handlers()
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=self.settings.headless)
            try:
                return await self.run_accounts(browser)
            finally:
                await browser.close()

    async def run_accounts(self, browser: Browser) -> RunSummary:
        """Process the enabled accounts with ``settings.clusters`` workers."""
        queue: asyncio.Queue[Account] = asyncio.Queue()
        for account in self.accounts:
            queue.put_nowait(account)

        cluster_count = min(self.settings.clusters, len(self.accounts))
        logger.info(
            f"Processing {len(self.accounts)} account(s) "
            f"with {cluster_count} cluster(s)"
        )
        await asyncio.gather(
            *(
                self._cluster(cluster_id, browser, queue)
                for cluster_id in range(1, cluster_count + 1)
            )
        )

        outcomes = ", ".join(
            f"{kind.value}={count}" for kind, count in self.summary.outcomes.items()
        )
        logger.info(
            f"Run finished: {self.summary.accounts_processed} account(s), "
            f"{self.summary.total} activity outcome(s) [{outcomes}]"
        )
        return self.summary

    async def _cluster(
        self, cluster_id: int, browser: Browser, queue: "asyncio.Queue[Account]"
    ) -> None:
        while not self.stop_requested:
            try:
                account = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            await self._process_account(cluster_id, browser, account)

        logger.info(f"[cluster {cluster_id}] Stopped before finishing the queue")

    async def _process_account(
        self, cluster_id: int, browser: Browser, account: Account
    ) -> None:
        label = f"cluster {cluster_id} {account.redacted_email}"
        try:
            context = await browser.new_context()
        except Exception as e:
            logger.error(f"[{label}] Could not open a browser context: {e}")
            return

        try:
            page = await context.new_page()
            await self._navigate(page, self.settings.base_url, label)
            self._record(
                await self.recovery.run(
                    page,
                    self._inspect_dashboard,
                    name=f"{label} dashboard",
                    close_on_invalid=False,
                )
            )

            for url in self.settings.activity_urls:
                if self.stop_requested:
                    break
                self._record(await self._run_url_reward(context, url, label))

            self.summary.accounts_processed += 1
        except Exception as e:
            logger.error(f"[{label}] Account processing failed: {e}", exc_info=True)
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"[{label}] Ignoring error while closing context: {e}")

    async def _run_url_reward(
        self, context: BrowserContext, url: str, label: str
    ) -> ActivityOutcome:
        page = await context.new_page()
        await self._navigate(page, url, label)
        return await self.recovery.run(
            page,
            complete_url_reward,
            name=f"{label} url-reward",
            close_on_invalid=True,
        )

    async def _navigate(self, page: Page, url: str, label: str) -> None:
        # Failed navigations leave an error page behind; the recovery
        # pre-check classifies it.
        try:
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout_ms,
            )
        except Exception as e:
            logger.warning(f"[{label}] Navigation to {url} failed: {e}")

    async def _inspect_dashboard(self, page: Page) -> None:
        if await self.validator.has_activity_content(page):
            logger.info(f"Activity content present on {page.url}")
        else:
            logger.info(f"No activity content found on {page.url}")

    def _record(self, outcome: ActivityOutcome) -> None:
        self.summary.record(outcome)

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                signal.signal(
                    sig, lambda *_: loop.call_soon_threadsafe(self.request_stop)
                )
