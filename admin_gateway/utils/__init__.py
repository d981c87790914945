"""
Utility modules for the admin gateway.

Pure helpers shared across the application: log level classification,
log querying, log parsing and date formatting.
"""

from .log_filters import (
    determine_log_level,
    filter_logs,
    limit_logs,
    matches_filter,
    sort_logs_by_timestamp,
)

__all__ = [
    "determine_log_level",
    "filter_logs",
    "limit_logs",
    "matches_filter",
    "sort_logs_by_timestamp",
]
