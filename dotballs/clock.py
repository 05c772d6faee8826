"""
IST date and time helpers.

Match dates and the daily "already processed" check are bucketed in
Indian Standard Time, a fixed UTC+5:30 offset.
"""
from datetime import datetime, timezone

from .config import IST_OFFSET

IST = timezone(IST_OFFSET, 'IST')


def now_ist(now: datetime | None = None) -> datetime:
    """
    Current time as an aware IST datetime.

    Args:
        now: Optional reference time. Naive values are taken to be UTC.

    Returns:
        Aware datetime in IST
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(IST)


def format_ist_datetime(now: datetime | None = None) -> str:
    """Format as 'YYYY-MM-DD HH:MM:SS' in IST, the format stored in Matches."""
    return now_ist(now).strftime('%Y-%m-%d %H:%M:%S')


def today_ist(now: datetime | None = None) -> str:
    """Today's IST date as 'YYYY-MM-DD'."""
    return now_ist(now).strftime('%Y-%m-%d')


def readable_ist_time(now: datetime | None = None) -> str:
    """Human-readable IST time for log lines, e.g. '18 April 2025, 07:30:00 pm IST'."""
    return now_ist(now).strftime('%d %B %Y, %I:%M:%S %p').replace('AM', 'am').replace('PM', 'pm') + ' IST'


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with a trailing 'Z'."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).replace(tzinfo=None).isoformat(timespec='seconds') + 'Z'
