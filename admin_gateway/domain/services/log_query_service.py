"""Log Query Service - Loads log files from disk and applies a LogFilter."""
import logging
from typing import List

from admin_gateway.domain.entities.log_entry import LogEntry
from admin_gateway.domain.entities.log_filter import LogFilter
from admin_gateway.infrastructure.logs.log_file_client import LogFileClient
from admin_gateway.utils.log_filters import filter_logs
from admin_gateway.utils.log_parsers import parse_log_file

logger = logging.getLogger(__name__)


class LogQueryService:
    def __init__(self, client: LogFileClient):
        self.client = client

    def load_logs(self, include_rotated: bool = False) -> List[LogEntry]:
        logs: List[LogEntry] = []
        for log_type, file_path in self.client.get_log_file_paths(include_rotated).items():
            content = self.client.read_log_file(file_path)
            if not content:
                continue
            service = self.client.get_service_from_log_type(log_type)
            logs.extend(parse_log_file(content, service, file_path))
        return logs

    def get_logs(self, log_filter: LogFilter) -> List[LogEntry]:
        """Get logs matching the filter, newest first."""
        # Older rotated files only matter when the query is bounded in time
        logs = self.load_logs(include_rotated=log_filter.has_date_range)
        results = filter_logs(logs, log_filter)
        logger.info(
            f"🔍 Log query matched {len(results)} of {len(logs)} entries "
            f"with filters {log_filter.to_dict()}"
        )
        return results
