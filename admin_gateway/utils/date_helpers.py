from datetime import datetime, timezone
from typing import Optional

MONTH_ABBREVIATIONS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def format_log_date(date: datetime) -> str:
    """Format a date the way rotating app logs are named: January-01-2025 (UTC)."""
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return f"{_MONTH_NAMES[date.month - 1]}-{date.day:02d}-{date.year}"


def get_current_date(now: Optional[datetime] = None) -> str:
    return format_log_date(now or datetime.now(timezone.utc))


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
