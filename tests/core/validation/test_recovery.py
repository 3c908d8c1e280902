"""Tests for the bounded recovery protocol."""

from unittest.mock import AsyncMock

import pytest

from core.models.domain.page import ActivityOutcome
from core.types import OutcomeKind
from core.validation.page_validator import PageValidator
from core.validation.recovery import RecoveryProtocol, wait_for_page_ready

from tests.helpers import make_page

BASE_URL = "https://rewards.bing.com"


@pytest.fixture
def recovery() -> RecoveryProtocol:
    return RecoveryProtocol(
        base_url=BASE_URL,
        allowed_domains=["rewards.bing.com", "bing.com"],
        validator=PageValidator(probe_timeout_ms=10),
        navigation_timeout_ms=1234,
        page_ready_timeout_ms=567,
    )


class TestWaitForPageReady:
    """Test the load-state wait."""

    @pytest.mark.asyncio
    async def test_ready(self) -> None:
        page = make_page()
        assert await wait_for_page_ready(page, 100) is True
        page.wait_for_load_state.assert_awaited_once_with("load", timeout=100)

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        page = make_page()
        page.wait_for_load_state.side_effect = TimeoutError("slow")
        assert await wait_for_page_ready(page, 100) is False


class TestRecoveryProtocol:
    """Test the pre-check, body and post-check phases."""

    @pytest.mark.asyncio
    async def test_valid_page_completes(self, recovery: RecoveryProtocol) -> None:
        page = make_page()
        body = AsyncMock()

        outcome = await recovery.run(page, body)

        assert outcome == ActivityOutcome.completed()
        assert outcome.is_success
        body.assert_awaited_once_with(page)
        page.goto.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_page_redirects_once(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page(url="chrome-error://chromewebdata/")
        body = AsyncMock()

        outcome = await recovery.run(page, body)

        assert outcome.kind == OutcomeKind.REDIRECTED_AND_ABORTED
        assert outcome.reason == "browser error page"
        body.assert_not_called()
        page.goto.assert_awaited_once_with(
            BASE_URL, wait_until="domcontentloaded", timeout=1234
        )
        page.wait_for_load_state.assert_awaited_once_with("load", timeout=567)

    @pytest.mark.asyncio
    async def test_invalid_page_closed_when_requested(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page(html="<html></html>")
        body = AsyncMock()

        outcome = await recovery.run(page, body, close_on_invalid=True)

        assert outcome == ActivityOutcome.skipped_invalid_page("empty page content")
        body.assert_not_called()
        page.close.assert_awaited_once()
        page.goto.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_redirect_still_aborts(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page(url="about:blank")
        page.goto.side_effect = TimeoutError("navigation timeout")

        outcome = await recovery.run(page, AsyncMock())

        assert outcome.kind == OutcomeKind.REDIRECTED_AND_ABORTED
        assert page.goto.await_count == 1
        page.wait_for_load_state.assert_not_called()

    @pytest.mark.asyncio
    async def test_domain_mismatch_after_body(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page()

        async def wander_off(target) -> None:
            target.url = "https://phishing.example.net/login"

        outcome = await recovery.run(page, wander_off)

        assert outcome.kind == OutcomeKind.DOMAIN_MISMATCH
        assert outcome.url == "https://phishing.example.net/login"
        assert not outcome.is_success

    @pytest.mark.asyncio
    async def test_body_error_becomes_failed_outcome(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page()
        body = AsyncMock(side_effect=RuntimeError("element detached"))

        outcome = await recovery.run(page, body)

        assert outcome == ActivityOutcome.failed("element detached")

    @pytest.mark.asyncio
    async def test_unreadable_page_is_not_an_error(
        self, recovery: RecoveryProtocol
    ) -> None:
        page = make_page(content_error=RuntimeError("target closed"))

        outcome = await recovery.run(page, AsyncMock(), close_on_invalid=True)

        assert outcome.kind == OutcomeKind.SKIPPED_INVALID_PAGE
        assert outcome.reason == "page check failed: target closed"

    @pytest.mark.asyncio
    async def test_redirect_to_base(self, recovery: RecoveryProtocol) -> None:
        page = make_page()
        assert await recovery.redirect_to_base(page) is True
        page.goto.side_effect = RuntimeError("net::ERR_ABORTED")
        assert await recovery.redirect_to_base(page) is False
