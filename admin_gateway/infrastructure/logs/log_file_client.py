"""Log File Client - Filesystem access for the monitored log files."""
import logging
import os
import re
from typing import Dict, List, Optional

from admin_gateway.config import Settings, settings as default_settings
from admin_gateway.domain.entities.log_entry import LogService
from admin_gateway.utils.date_helpers import get_current_date

logger = logging.getLogger(__name__)

APP_LOG_KEY = "App"

SERVICE_MAPPING: Dict[str, LogService] = {
    APP_LOG_KEY: LogService.APP,
    "App-Error": LogService.APP,
    "nginx": LogService.NGINX,
    "Console": LogService.CONSOLE,
    "Console-Error": LogService.CONSOLE_ERROR,
}

_ROTATION_SUFFIX = re.compile(r"-\d+$")


def build_log_paths(config: Settings) -> Dict[str, str]:
    return {
        "nginx": config.NGINX_ACCESS_LOG,
        APP_LOG_KEY: os.path.join(config.APP_LOG_DIR, f"app-{get_current_date()}.log"),
        "App-Error": os.path.join(config.APP_LOG_DIR, "app-error.log"),
        "Console": os.path.join(config.CONSOLE_LOG_DIR, f"{config.CONSOLE_PROCESS_NAME}-out-0.log"),
        "Console-Error": os.path.join(config.CONSOLE_LOG_DIR, f"{config.CONSOLE_PROCESS_NAME}-error-0.log"),
    }


class LogFileClient:
    """Locates and reads the log files of the monitored services."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._log_paths = build_log_paths(self.config)

    def read_log_file(self, file_path: str) -> str:
        """Return the file content, or an empty string if it cannot be read."""
        if not self.file_exists(file_path):
            logger.info(f"ℹ️ Log file does not exist: {file_path}")
            return ""

        try:
            with open(file_path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            logger.error(f"❌ Error reading log file {file_path}: {e}")
            return ""

    def find_rotating_logs(self, base_path: str) -> List[str]:
        """Find rotating siblings of base_path, newest modification time first.

        Files share the prefix before the first '-' of the base file name;
        error logs are excluded.
        """
        directory = os.path.dirname(base_path)
        prefix = os.path.basename(base_path).split("-")[0]

        try:
            candidates = [
                os.path.join(directory, name)
                for name in os.listdir(directory)
                if name.startswith(prefix) and "error" not in name.lower()
            ]
            candidates.sort(key=os.path.getmtime, reverse=True)
        except OSError as e:
            logger.error(f"❌ Error finding rotating logs for {base_path}: {e}")
            return []

        return candidates

    def find_latest_rotating_log(self, base_path: str) -> Optional[str]:
        logs = self.find_rotating_logs(base_path)
        return logs[0] if logs else None

    def file_exists(self, file_path: str) -> bool:
        return os.path.isfile(file_path) and os.access(file_path, os.R_OK)

    def get_log_file_paths(self, include_rotated: bool = False) -> Dict[str, str]:
        """Map each log key to the file that should be read for it.

        The app log resolves to its most recent rotating file. With
        include_rotated, older rotating files are added as ``App-<n>``.
        """
        log_files = dict(self._log_paths)

        latest = self.find_latest_rotating_log(log_files[APP_LOG_KEY])
        if latest:
            log_files[APP_LOG_KEY] = latest

        if include_rotated:
            rotated = self.find_rotating_logs(self._log_paths[APP_LOG_KEY])
            for index, log_path in enumerate(rotated):
                # The newest one is already the primary app log
                if index > 0:
                    log_files[f"{APP_LOG_KEY}-{index}"] = log_path

        return log_files

    def get_service_from_log_type(self, log_type: str) -> LogService:
        base_log_type = _ROTATION_SUFFIX.sub("", log_type)
        return SERVICE_MAPPING.get(base_log_type, LogService.SYSTEM)

    def get_log_paths_config(self) -> Dict[str, str]:
        return dict(self._log_paths)

    def get_service_mapping(self) -> Dict[str, LogService]:
        return dict(SERVICE_MAPPING)
