"""Date helpers shared by the dashboard and calendar views.

Deadlines come back from the backend as UTC instants; everything the user sees
(day buckets, "due today") is computed in local time. Naive datetimes are
taken as local time.
"""

from __future__ import annotations

import math
from datetime import date, datetime

SECONDS_PER_DAY = 24 * 60 * 60


def to_local(value: datetime) -> datetime:
    """Aware datetime in the local timezone."""

    return value.astimezone()


def local_date(value: datetime) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone().date()


def now_local() -> datetime:
    return datetime.now().astimezone()


def days_until(deadline: datetime, now: datetime | None = None) -> int:
    """Whole days left until `deadline`, rounded up (negative when overdue)."""

    now = to_local(now) if now is not None else now_local()
    delta = to_local(deadline) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)
