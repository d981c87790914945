from datetime import datetime
from typing import Optional

from admin_gateway.domain.entities.log_entry import LogLevel
from admin_gateway.domain.entities.log_filter import LogFilter
from admin_gateway.domain.exceptions import BadRequestError
from admin_gateway.utils.date_helpers import ensure_utc


def build_log_filter(
    service: Optional[str] = None,
    level: Optional[LogLevel] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search_term: Optional[str] = None,
    limit: Optional[int] = None,
    max_limit: int = 100,
) -> LogFilter:
    """Build a LogFilter from already type-checked query values.

    Naive dates are read as UTC and the limit is capped at max_limit.

    Raises:
        BadRequestError: If startDate is after endDate
    """
    start = ensure_utc(start_date) if start_date else None
    end = ensure_utc(end_date) if end_date else None
    if start and end and start > end:
        raise BadRequestError("Invalid date range: startDate must not be after endDate")

    return LogFilter(
        service=service or None,
        level=level,
        start_date=start,
        end_date=end,
        search_term=search_term or None,
        limit=min(limit, max_limit) if limit is not None else None,
    )
