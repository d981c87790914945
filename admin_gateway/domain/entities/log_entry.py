from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"

    @classmethod
    def _missing_(cls, value):
        # Accept "ERROR", "Warn", ... from query strings and log files
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


class LogService(str, Enum):
    APP = "App"
    NGINX = "nginx"
    CONSOLE = "Console"
    CONSOLE_ERROR = "Console-Error"
    SYSTEM = "System"


class LogEntry(BaseModel):
    timestamp: datetime
    service: str
    level: LogLevel
    message: str
    log_file: Optional[str] = None
    version: Optional[str] = None


class RequestDetails(BaseModel):
    url: str = "N/A"
    method: str = "N/A"
    body: Any = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)


class ResponseDetails(BaseModel):
    status_code: Union[int, str] = "N/A"
    body: Any = Field(default_factory=dict)


class AppLogEntry(LogEntry):
    """Structured JSON line written by the application's request logger."""
    log_id: Optional[str] = None
    request: Optional[RequestDetails] = None
    response: Optional[ResponseDetails] = None


class NginxLogEntry(LogEntry):
    remote_addr: str
    remote_user: str
    request: str
    status: int
    bytes_sent: int
    http_referer: str
    http_user_agent: str
    gzip_ratio: Optional[str] = None


class ErrorLogEntry(LogEntry):
    """An error grouped together with its stack trace and detail lines."""
    stack: List[str] = Field(default_factory=list)
    full_text: str = ""
    details: Optional[str] = None
