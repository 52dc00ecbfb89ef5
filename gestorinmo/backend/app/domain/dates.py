# backend/app/domain/dates.py
from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any, Optional

SECONDS_PER_DAY = 24 * 60 * 60


def as_date(v: Any) -> Optional[date]:
    """
    date | datetime | ISO string -> date. Anything unparseable -> None.
    """
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip()[:10])
    except ValueError:
        return None


def as_datetime(v: Any) -> Optional[datetime]:
    """
    Same as as_date() but anchored at midnight, so it can be compared with a wall-clock now.
    Datetimes pass through untouched.
    """
    if isinstance(v, datetime):
        return v
    d = as_date(v)
    if d is None:
        return None
    return datetime.combine(d, time.min)


def ceil_days_between(a: datetime, b: datetime) -> int:
    """Absolute distance between two instants in whole days, rounded up."""
    seconds = abs((a - b).total_seconds())
    return int(math.ceil(seconds / SECONDS_PER_DAY))


def in_month_of(v: Any, now: datetime) -> bool:
    d = as_date(v)
    if d is None:
        return False
    return d.year == now.year and d.month == now.month


def newest_first_key(v: Any) -> date:
    # unparseable dates sort last
    return as_date(v) or date.min


def wall_clock(now: Any = None) -> datetime:
    """
    Normalizes the evaluation instant: None -> local now, date -> midnight,
    aware datetime -> naive local time (record dates are naive calendar days).
    """
    if now is None:
        return datetime.now()
    if isinstance(now, datetime):
        return now.astimezone().replace(tzinfo=None) if now.tzinfo is not None else now
    if isinstance(now, date):
        return datetime.combine(now, time.min)
    raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")
