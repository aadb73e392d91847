from datetime import datetime, timezone
from typing import Optional


class Clock:
    """Source of the current time; swapped out in tests"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_deadline_passed(opportunity, clock: Optional[Clock] = None) -> bool:
    """Display-only helper. Registration never consults the deadline."""
    if opportunity.application_deadline is None:
        return False
    clock = clock or Clock()
    return as_utc(opportunity.application_deadline) < clock.now()


def days_until_deadline(opportunity, clock: Optional[Clock] = None) -> Optional[int]:
    if opportunity.application_deadline is None:
        return None
    clock = clock or Clock()
    delta = as_utc(opportunity.application_deadline) - clock.now()
    return max(delta.days, 0)
