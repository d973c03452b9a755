"""
Time helpers shared by the mood and recommendation services.

Day boundaries are computed in a fixed UTC offset rather than the caller's
timezone, so every staleness check agrees on when "today" started.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_day(now: datetime, offset_hours: int) -> date:
    """Calendar day of ``now`` in the fixed offset."""
    return now.astimezone(timezone(timedelta(hours=offset_hours))).date()


def local_midnight_utc(now: datetime, offset_hours: int) -> datetime:
    """Most recent local midnight in the fixed offset, expressed in UTC."""
    tz = timezone(timedelta(hours=offset_hours))
    midnight = datetime.combine(local_day(now, offset_hours), time(0, 0), tzinfo=tz)
    return midnight.astimezone(timezone.utc)
