"""Shared Playwright page setup."""

from playwright.async_api import Page, Route

from src.pool_times.logging import get_logger

log = get_logger(__name__)

# Stylesheets and scripts stay: the calendar widget needs both to render.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset({"image", "font", "media"})


async def configure_page_for_scraping(page: Page, *, timeout_ms: int = 30000) -> None:
    """Set up a Playwright page for snapshotting.

    Blocks resource types that never carry schedule data (images, fonts,
    media) so the page reaches networkidle sooner.

    Args:
        page: Playwright Page instance.
        timeout_ms: Default timeout for actions and navigation.
    """

    async def _block_resources(route: Route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _block_resources)
    page.set_default_timeout(timeout_ms)
    page.set_default_navigation_timeout(timeout_ms)
    log.debug("page_configured", blocked=sorted(BLOCKED_RESOURCE_TYPES))
