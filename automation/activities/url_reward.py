"""URL reward: visiting the page is the whole activity."""

from playwright.async_api import Page

from core.constants import URL_REWARD_DWELL_MS
from core.log import get_logger

logger = get_logger(__name__)


async def complete_url_reward(page: Page, dwell_ms: int = URL_REWARD_DWELL_MS) -> None:
    """Stay on the page long enough for the visit to count, then close it."""
    logger.info(f"Trying to complete URL reward at {page.url}")
    await page.wait_for_timeout(dwell_ms)
    await page.close()
    logger.info("Completed the URL reward")
