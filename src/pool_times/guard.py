"""Page validity checks run before any extraction is attempted.

A blocked or half-rendered page would otherwise "succeed" with an empty or
garbage schedule, so these checks raise instead of returning a flag.
"""

from collections.abc import Iterable

from src.pool_times.config import DEFAULT_BLOCK_PHRASES
from src.pool_times.errors import BlockedPageError, NoHeadingError
from src.pool_times.logging import get_logger
from src.pool_times.models import PageSignature
from src.pool_times.text import normalize_text

log = get_logger(__name__)


def check_page_signature(
    signature: PageSignature,
    block_phrases: Iterable[str] | None = None,
) -> None:
    """Reject pages with no heading or with a block/CAPTCHA title or heading.

    Args:
        signature: Title and first <h1> text read from the page.
        block_phrases: Case-insensitive substrings marking a blocked page.
            Defaults to DEFAULT_BLOCK_PHRASES.

    Raises:
        NoHeadingError: If the normalized heading is empty.
        BlockedPageError: If the title or heading contains a block phrase.
    """
    title = normalize_text(signature.page_title)
    heading = normalize_text(signature.primary_heading)

    if not heading:
        log.warning("page_invalid", reason="no_heading", title=title)
        raise NoHeadingError(title)

    phrases = DEFAULT_BLOCK_PHRASES if block_phrases is None else block_phrases
    lowered_title = title.lower()
    lowered_heading = heading.lower()
    for phrase in phrases:
        needle = phrase.lower()
        if needle and (needle in lowered_title or needle in lowered_heading):
            log.warning("page_blocked", phrase=phrase, title=title, heading=heading)
            raise BlockedPageError(title, heading)
