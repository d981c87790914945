"""Log level classification and in-memory log querying.

Everything here is pure: inputs are never mutated and new lists are returned.
"""
import re
from typing import Iterable, List, Sequence

from admin_gateway.domain.entities.log_entry import LogEntry, LogLevel
from admin_gateway.domain.entities.log_filter import DEFAULT_LOG_LIMIT, LogFilter

_NAMED_ERROR_PATTERN = re.compile(r"\w+error:")


def determine_log_level(service: str, log_line: str) -> LogLevel:
    """Determine the level of a raw log line.

    Rules are checked top to bottom and the first match wins, so a stream
    whose name contains "error" always yields ERROR, and error heuristics
    beat warning heuristics.

    Args:
        service: Log stream name (e.g. 'App-Error')
        log_line: Raw log line content

    Returns:
        The LogLevel for the line
    """
    # Error log files are segregated at the source
    if "error" in service.lower():
        return LogLevel.ERROR

    line = log_line.lower()
    if (
        "error" in line
        or "err]" in line
        or "exception" in line
        or _NAMED_ERROR_PATTERN.search(line)
        or "stack trace" in line
        or "code:" in line
        or (line.startswith("at ") and "/" in line)
    ):
        return LogLevel.ERROR
    if "warn" in line or "warning" in line:
        return LogLevel.WARN
    return LogLevel.INFO


def matches_filter(log: LogEntry, log_filter: LogFilter) -> bool:
    """Check whether a log entry satisfies every criterion set on the filter."""
    if log_filter.service and log.service != log_filter.service:
        return False
    if log_filter.level and log.level != log_filter.level:
        return False
    if log_filter.start_date is not None and log.timestamp <= log_filter.start_date:
        return False
    if log_filter.end_date is not None and log.timestamp >= log_filter.end_date:
        return False
    if log_filter.search_term and log_filter.search_term not in log.message:
        return False
    return True


def sort_logs_by_timestamp(logs: Iterable[LogEntry], order: str = "desc") -> List[LogEntry]:
    """Return a new list sorted by timestamp; ties keep their input order."""
    return sorted(logs, key=lambda log: log.timestamp, reverse=(order == "desc"))


def limit_logs(logs: Sequence[LogEntry], limit: int = DEFAULT_LOG_LIMIT) -> List[LogEntry]:
    return list(logs[:limit])


def filter_logs(logs: Iterable[LogEntry], log_filter: LogFilter) -> List[LogEntry]:
    """Filter, sort newest first, and truncate to the filter's limit."""
    filtered = [log for log in logs if matches_filter(log, log_filter)]
    ordered = sort_logs_by_timestamp(filtered, "desc")
    return limit_logs(ordered, log_filter.effective_limit)
