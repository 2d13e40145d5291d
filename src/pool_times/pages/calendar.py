"""CalendarPage - captures a snapshot of the ActiveCommunities calendar.

The calendar is a FullCalendar web component (#calendar) rendered inside a
shadow root, fed by XHR calls whose URLs and payload shapes are not stable.
Rather than targeting one endpoint, the page records every JSON response
seen during load, then gathers everything else that might hold sessions:

  - captured JSON response bodies, in arrival order
  - inline <script> text (bootstrapped state)
  - the calendar's serialized shadow root, then the full page HTML

plus the page title and first <h1> for the validity check. The listener must
be registered before navigation or early responses are missed.
"""

import asyncio

from playwright.async_api import Page, Response, TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.pool_times.config import ScraperConfig, get_config
from src.pool_times.errors import TransientError
from src.pool_times.logging import get_logger
from src.pool_times.models import CapturedResponse, PageSignature, PageSnapshot

log = get_logger(__name__)

_INLINE_SCRIPTS_JS = """() => Array.from(document.querySelectorAll('script:not([src])'))
    .map((s) => s.textContent || '')
    .filter((t) => t.trim().length > 0)"""

_SHADOW_HTML_JS = """(selector) => {
    const host = document.querySelector(selector);
    return host && host.shadowRoot ? host.shadowRoot.innerHTML : '';
}"""


class CalendarPage:
    """Weekly calendar page, captured as a PageSnapshot."""

    HEADING = "h1"

    def __init__(self, page: Page, *, config: ScraperConfig | None = None) -> None:
        self.page = page
        self.config = config or get_config()
        self._pending: list[asyncio.Future] = []

    def start_capture(self) -> None:
        """Record JSON responses from now on. Call before navigate()."""
        self.page.on("response", self._on_response)

    def _on_response(self, response: Response) -> None:
        # Broad check: endpoints answer with application/json, text/json,
        # application/x-json, ...
        content_type = (response.headers.get("content-type") or "").lower()
        if "json" not in content_type:
            return
        self._pending.append(asyncio.ensure_future(_read_json(response)))

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_fixed(5),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    async def navigate(self, url: str | None = None) -> None:
        """Load the calendar and wait for the network to settle.

        Raises:
            TransientError: If the page does not reach networkidle in time.
        """
        url = url or self.config.calendar_url
        try:
            await self.page.goto(
                url,
                wait_until="networkidle",
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightTimeoutError:
            log.warning("calendar_page_timeout", url=url)
            raise TransientError(f"Calendar page failed to load: {url}")

        log.info("calendar_page_navigated", url=url)

    async def collect_responses(self) -> list[CapturedResponse]:
        """Wait for every captured body; some resolve after networkidle."""
        results = await asyncio.gather(*self._pending)
        responses = [r for r in results if r is not None]
        log.info(
            "json_responses_captured",
            count=len(responses),
            urls=[r.url for r in responses],
        )
        return responses

    async def read_signature(self) -> PageSignature:
        """Read the page title and first <h1> text.

        A missing <h1> is not an error here; challenge pages often have none,
        and check_page_signature reports it.
        """
        try:
            await self.page.wait_for_selector(
                self.HEADING, timeout=self.config.heading_timeout_ms
            )
        except PlaywrightTimeoutError:
            log.debug("heading_not_found", selector=self.HEADING)

        title = await self.page.title()
        heading = self.page.locator(self.HEADING).first
        heading_text = ""
        if await heading.count() > 0:
            heading_text = await heading.text_content() or ""
        return PageSignature(page_title=title, primary_heading=heading_text)

    async def snapshot(self) -> PageSnapshot:
        """Gather responses, scripts, markup and signature into one snapshot."""
        responses = await self.collect_responses()
        signature = await self.read_signature()
        scripts = await self.page.evaluate(_INLINE_SCRIPTS_JS)
        shadow_html = await self.page.evaluate(
            _SHADOW_HTML_JS, self.config.calendar_host_selector
        )
        content = await self.page.content()

        markup = [html for html in (shadow_html, content) if html]
        log.info(
            "snapshot_captured",
            responses=len(responses),
            scripts=len(scripts),
            markup=len(markup),
        )
        return PageSnapshot(
            signature=signature,
            responses=responses,
            scripts=scripts,
            markup=markup,
        )


async def _read_json(response: Response) -> CapturedResponse | None:
    url = response.url
    try:
        body = await response.json()
    except Exception:
        # Mislabelled body, or the response was discarded by a navigation
        log.debug("json_body_unreadable", url=url)
        return None
    return CapturedResponse(url=url, body=body)
