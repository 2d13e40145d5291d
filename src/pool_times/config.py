"""Scraper configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_BLOCK_PHRASES: tuple[str, ...] = (
    "attention required",
    "sorry, you have been blocked",
    "cloudflare",
    "just a moment",
    "verify you are human",
)


class ScraperConfig(BaseSettings):
    """Scraper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    List values (BLOCK_PHRASES) are given as JSON arrays.
    """

    # ActiveCommunities calendar (Britannia pool, weekly view)
    calendar_url: str = Field(
        default=(
            "https://anc.ca.apm.activecommunities.com/vancouver/calendars"
            "?onlineSiteId=0&no_scroll_top=true&defaultCalendarId=55"
            "&locationId=59&displayType=0&view=2"
        ),
        description="Calendar page to snapshot",
    )
    calendar_host_selector: str = Field(
        default="#calendar",
        description="Web component hosting the calendar shadow root",
    )

    # Output paths
    pool_times_path: str = Field(
        default="pool-times.json",
        description="Where the schedule document is written",
    )
    summary_path: str = Field(
        default="britannia-hours.json",
        description="Where the page summary document is written",
    )
    debug_html_path: str = Field(
        default="debug-page.html",
        description="Rendered HTML saved when extraction finds no sessions",
    )

    # Browser settings
    headless: bool = Field(default=True, description="Run Chromium headless")
    navigation_timeout_ms: int = Field(
        default=60000,
        description="Timeout for page.goto(wait_until='networkidle')",
    )
    heading_timeout_ms: int = Field(
        default=15000,
        description="How long to wait for an <h1> before reading the signature",
    )

    # Extraction
    block_phrases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCK_PHRASES),
        description="Title/heading phrases that mark a blocked or challenge page",
    )
    max_search_depth: int = Field(
        default=6,
        description="Nesting depth bound for the structural JSON search",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScraperConfig | None = None


def get_config() -> ScraperConfig:
    """Get the scraper configuration singleton.

    Returns:
        ScraperConfig: Scraper configuration instance
    """
    global _config
    if _config is None:
        _config = ScraperConfig()
    return _config
