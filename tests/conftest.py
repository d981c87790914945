from datetime import datetime, timezone

import pytest

from admin_gateway.config import Settings
from admin_gateway.domain.entities.log_entry import LogEntry, LogLevel


def utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)


def make_entry(timestamp: str, service: str = "App", level: LogLevel = LogLevel.INFO,
               message: str = "message") -> LogEntry:
    return LogEntry(timestamp=utc(timestamp), service=service, level=level, message=message, log_file="test.log")


@pytest.fixture
def log_settings(tmp_path):
    app_dir = tmp_path / "app"
    console_dir = tmp_path / "pm2"
    app_dir.mkdir()
    console_dir.mkdir()
    return Settings(
        APP_LOG_DIR=str(app_dir),
        CONSOLE_LOG_DIR=str(console_dir),
        CONSOLE_PROCESS_NAME="api-server",
        NGINX_ACCESS_LOG=str(tmp_path / "nginx" / "access.log"),
        LOGS_MAX_LIMIT=100,
    )
