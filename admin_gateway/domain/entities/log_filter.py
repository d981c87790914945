"""Log Filter Entity - Query criteria over a collection of log entries."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from admin_gateway.domain.entities.log_entry import LogLevel

DEFAULT_LOG_LIMIT = 100


@dataclass(frozen=True)
class LogFilter:
    """Field-level predicates plus a result-count cap.

    Every field is optional; an unset field imposes no constraint. Date bounds
    are exclusive on both ends.
    """

    service: Optional[str] = None
    level: Optional[LogLevel] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search_term: Optional[str] = None
    limit: Optional[int] = None

    @property
    def effective_limit(self) -> int:
        return DEFAULT_LOG_LIMIT if self.limit is None else self.limit

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def to_dict(self) -> dict:
        return {
            "service": self.service,
            "level": self.level.value if self.level else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "search_term": self.search_term,
            "limit": self.effective_limit,
        }
