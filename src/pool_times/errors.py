"""Error hierarchy for scraping retry classification.

The transient/permanent split lets tenacity retry decorators classify
failures automatically: navigation timeouts are retried, invalid pages are not.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def navigate(self, url: str):
        ...

Extraction misses are not errors. A strategy that finds nothing returns None,
and a page with no recognisable sessions produces an empty ScheduleResult.
"""


class ScrapingError(Exception):
    """Base exception for all scraping errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: navigation timeouts, 503 Service Unavailable, slow page loads.
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry."""

    pass


class InvalidPageError(PermanentError):
    """The captured page cannot be trusted as a schedule snapshot."""

    pass


class NoHeadingError(InvalidPageError):
    """The page has no usable primary heading.

    Usually means the page never rendered (JS challenge, empty shell).
    """

    def __init__(self, title: str = "") -> None:
        self.title = title
        super().__init__("No <h1> heading found on the page.")


class BlockedPageError(InvalidPageError):
    """The page title or heading matches a known block/CAPTCHA phrase."""

    def __init__(self, title: str, heading: str) -> None:
        self.title = title
        self.heading = heading
        super().__init__(
            f'Scrape appears blocked (title: "{title}", h1: "{heading}").'
        )
