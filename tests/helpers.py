"""Shared fakes for tests."""

import asyncio
from collections.abc import Sequence
from unittest.mock import AsyncMock, MagicMock

from core.controller.launcher import ProcessHandle, ProcessLauncher

VALID_HTML = (
    "<html><head><title>Rewards</title></head><body>"
    + "<div class='dashboard'>Welcome back to your rewards dashboard</div>" * 4
    + "</body></html>"
)


class FakeHandle(ProcessHandle):
    """Process handle whose exit is driven by the test."""

    def __init__(self, pid: int) -> None:
        self._pid = pid
        self._exited = asyncio.Event()
        self.returncode: int | None = None
        self.stop_requests = 0
        self.exit_on_stop: int | None = 0
        self.fail_stop: Exception | None = None

    @property
    def pid(self) -> int:
        return self._pid

    async def wait(self) -> int:
        await self._exited.wait()
        assert self.returncode is not None
        return self.returncode

    def request_stop(self) -> None:
        if self.fail_stop is not None:
            raise self.fail_stop
        self.stop_requests += 1
        if self.exit_on_stop is not None:
            self.exit(self.exit_on_stop)

    def exit(self, returncode: int) -> None:
        self.returncode = returncode
        self._exited.set()


class FakeLauncher(ProcessLauncher):
    """Launcher that records commands and hands out ``FakeHandle``s."""

    def __init__(self) -> None:
        self.commands: list[list[str]] = []
        self.handles: list[FakeHandle] = []
        self.error: Exception | None = None
        self.delay = 0.0
        self.exit_on_stop: int | None = 0

    async def launch(self, command: Sequence[str]) -> ProcessHandle:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.commands.append(list(command))
        handle = FakeHandle(pid=1000 + len(self.handles))
        handle.exit_on_stop = self.exit_on_stop
        self.handles.append(handle)
        return handle

    @property
    def last_handle(self) -> FakeHandle:
        return self.handles[-1]


def make_page(
    url: str = "https://rewards.bing.com/",
    html: str = VALID_HTML,
    content_error: Exception | None = None,
    visible_selectors: Sequence[str] = (),
) -> MagicMock:
    """Build a mock Playwright page.

    ``visible_selectors`` are the selectors whose live locator resolves as
    visible; every other locator times out.
    """
    page = MagicMock()
    page.url = url
    if content_error is not None:
        page.content = AsyncMock(side_effect=content_error)
    else:
        page.content = AsyncMock(return_value=html)
    page.close = AsyncMock()
    page.goto = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.probe_calls = []

    def locator(selector: str) -> MagicMock:
        handle = MagicMock()

        async def wait_for(**kwargs: object) -> None:
            page.probe_calls.append((selector, kwargs))
            if selector not in visible_selectors:
                raise TimeoutError(f"waiting for {selector}")

        handle.first.wait_for = AsyncMock(side_effect=wait_for)
        return handle

    page.locator = MagicMock(side_effect=locator)
    return page
