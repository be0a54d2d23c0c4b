"""
Relative-date anchors used to ground phrases like "yesterday" in the extraction prompt.
"""

from datetime import date, datetime, timedelta
from typing import NamedTuple, Optional, Union


class DateAnchors(NamedTuple):
    """ISO-8601 dates the extraction model resolves relative language against."""

    today: str
    yesterday: str
    day_before_yesterday: str


def resolve_anchors(now: Optional[Union[date, datetime]] = None) -> DateAnchors:
    """
    Compute today, yesterday and the day before yesterday.

    Args:
        now: Reference point; the local clock is used when omitted

    Returns:
        DateAnchors with ISO-formatted dates
    """
    if now is None:
        current = date.today()
    elif isinstance(now, datetime):
        current = now.date()
    else:
        current = now

    return DateAnchors(
        today=current.isoformat(),
        yesterday=(current - timedelta(days=1)).isoformat(),
        day_before_yesterday=(current - timedelta(days=2)).isoformat(),
    )
