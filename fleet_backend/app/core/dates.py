"""
Date helpers shared by the derived-data services.

Stored dates are compared as UTC midnights; SQLite hands back naive
datetimes, which are taken to be UTC.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Optional, Union

SECONDS_PER_DAY = 86400


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[Union[datetime, date]]) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def whole_days_between(later: Union[datetime, date], earlier: Union[datetime, date]) -> int:
    """Full days from ``earlier`` to ``later``, truncated toward zero."""
    delta = as_utc(later) - as_utc(earlier)
    return math.trunc(delta.total_seconds() / SECONDS_PER_DAY)
