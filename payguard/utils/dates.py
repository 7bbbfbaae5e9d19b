"""
Calendar helpers for the bill pipeline.

Every function takes "today" or a clock explicitly; nothing here reads the
wall clock on its own except the default `utc_now` clock.
"""
import math
from datetime import date, datetime, time, timezone
from typing import Callable, Union

DateLike = Union[date, datetime, str]
Clock = Callable[[], datetime]

SECONDS_PER_DAY = 24 * 3600

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def current_date(clock: Clock = utc_now) -> date:
    """Today's calendar date (UTC) according to the clock."""
    return clock().astimezone(timezone.utc).date()

def current_timestamp(clock: Clock = utc_now) -> datetime:
    return clock().astimezone(timezone.utc)

def parse_date(value: DateLike) -> date:
    """Accepts a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)

def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(parse_date(value), time.min, tzinfo=timezone.utc)

def days_difference(from_date: DateLike, to_date: DateLike) -> int:
    """
    Signed number of calendar days from `from_date` to `to_date`,
    rounded up. Positive when `to_date` is later.
    """
    if not isinstance(from_date, datetime) and not isinstance(to_date, datetime):
        return (parse_date(to_date) - parse_date(from_date)).days
    delta = _as_datetime(to_date) - _as_datetime(from_date)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)

def days_overdue(due_date: DateLike, today: DateLike) -> int:
    """Days past the due date as of `today`; never negative."""
    return max(0, days_difference(due_date, today))

def is_not_past(value: DateLike, today: DateLike) -> bool:
    """True when `value` is today or later."""
    return parse_date(value) >= parse_date(today)
