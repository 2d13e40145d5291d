"""Weekly pool schedule extraction for the Britannia calendar.

Snapshots the ActiveCommunities calendar page (CalendarPage) and turns the
captured JSON, inline scripts or rendered markup into one canonical weekly
schedule document (extract_schedule).
"""

from src.pool_times.errors import BlockedPageError, NoHeadingError
from src.pool_times.models import PageSignature, PageSnapshot, ScheduleResult
from src.pool_times.pipeline import extract_schedule, summarize_page

__all__ = [
    "extract_schedule",
    "summarize_page",
    "PageSignature",
    "PageSnapshot",
    "ScheduleResult",
    "BlockedPageError",
    "NoHeadingError",
]
