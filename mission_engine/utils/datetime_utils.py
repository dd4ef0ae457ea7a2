"""Date and time utilities.

Timestamps are compared as naive UTC: anything carrying an offset is
converted to UTC and stripped so aware and naive inputs never mix.
"""

from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 3600


def days_until(moment: datetime, now: datetime) -> float:
    """Fractional days from ``now`` to ``moment``; negative once passed."""
    return (moment - now).total_seconds() / SECONDS_PER_DAY


def windows_overlap(
    start_a: datetime,
    end_a: Optional[datetime],
    start_b: datetime,
    end_b: Optional[datetime],
) -> bool:
    """Inclusive overlap test; a missing end means open-ended."""
    a_before_b_ends = end_b is None or start_a <= end_b
    b_before_a_ends = end_a is None or start_b <= end_a
    return a_before_b_ends and b_before_a_ends


def to_naive_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Current time as naive UTC, whole seconds."""
    return to_naive_utc(datetime.now(timezone.utc)).replace(microsecond=0)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string into naive UTC; datetimes are normalized, None passes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    text = str(value)
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return to_naive_utc(datetime.fromisoformat(text))
