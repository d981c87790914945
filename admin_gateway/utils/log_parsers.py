"""Parsers turning raw log file content into LogEntry records.

Supported formats:
- app: one JSON object per line, written by the application's request logger
- nginx: combined access log format
- console: winston console lines, ``[Jul-03-2025 12:49:28] info (1.0.0): message``
- console error: multi-line error output with stack traces and JSON details
"""
import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from admin_gateway.domain.entities.log_entry import (
    AppLogEntry,
    ErrorLogEntry,
    LogEntry,
    LogLevel,
    LogService,
    NginxLogEntry,
    RequestDetails,
    ResponseDetails,
)
from admin_gateway.utils.date_helpers import MONTH_ABBREVIATIONS, ensure_utc
from admin_gateway.utils.log_filters import determine_log_level

logger = logging.getLogger(__name__)

NGINX_LOG_PATTERN = re.compile(
    r'^(\S+) (\S+) (\S+) \[([^\]]+)\] "([^"]*)" (\d+) (\d+) "([^"]*)" "([^"]*)"(?: "([^"]*)")?$'
)
WINSTON_LOG_PATTERN = re.compile(
    r"\[([\w\-]+ [\d:]+)\] (?:\x1b?\[\d+m)?(\w+)(?:\x1b?\s?\[\d+m)? \(([\d.]+)\): (.+)"
)
TIMESTAMP_PATTERN = re.compile(r"^\[([A-Za-z]{3}-\d{2}-\d{4} \d{2}:\d{2}:\d{2})\]\s+(\w+):\s*(.*)$")
ERROR_HEADER_MARKERS = ("Error:", "ValidationError:", "FirebaseAuthError:")

# Formats tried after ISO 8601 and the nginx format
_FALLBACK_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%B %d, %Y %H:%M:%S",
    "%b %d, %Y %H:%M:%S",
    "%b-%d-%Y %H:%M:%S",
)


def _coerce_level(raw_level, service: str, message: str) -> LogLevel:
    if isinstance(raw_level, str):
        value = raw_level.strip().lower()
        if value == "warning":
            return LogLevel.WARN
        try:
            return LogLevel(value)
        except ValueError:
            pass
    return determine_log_level(service, message or "")


def parse_log_timestamp(date_time_str: str) -> datetime:
    """Parse ``Jul-03-2025 12:49:28`` (server local time) into an aware UTC datetime.

    Falls back to the current time when the string cannot be parsed.
    """
    try:
        date_part, time_part = date_time_str.split(" ")
        month, day, year = date_part.split("-")
        hours, minutes, seconds = time_part.split(":")

        month_num = MONTH_ABBREVIATIONS.get(month)
        if month_num is None:
            raise ValueError(f"Invalid month: {month}")

        local = datetime(int(year), month_num, int(day), int(hours), int(minutes), int(seconds))
        return local.astimezone().astimezone(timezone.utc)
    except ValueError as e:
        logger.warning(f"⚠️ Failed to parse timestamp '{date_time_str}': {e}")
        return datetime.now(timezone.utc)


def normalize_timestamp(timestamp: str) -> datetime:
    """Normalize ISO 8601, nginx (``02/Jul/2025:02:13:02 -0500``) and a few
    common date strings into an aware UTC datetime."""
    try:
        return ensure_utc(datetime.fromisoformat(timestamp.replace("Z", "+00:00")))
    except ValueError:
        pass

    if "/" in timestamp and ":" in timestamp:
        try:
            return datetime.strptime(timestamp, "%d/%b/%Y:%H:%M:%S %z").astimezone(timezone.utc)
        except ValueError:
            pass

    for fmt in _FALLBACK_TIMESTAMP_FORMATS:
        try:
            return ensure_utc(datetime.strptime(timestamp, fmt))
        except ValueError:
            continue

    logger.warning(f"⚠️ Unrecognized timestamp '{timestamp}', using current time")
    return datetime.now(timezone.utc)


def parse_app_log_line(line: str, service: LogService, log_file: str) -> Optional[AppLogEntry]:
    """Parse a single JSON line from the app log.

    Lines that are not JSON objects, carry no timestamp, or hold fields of
    the wrong shape are skipped.
    """
    try:
        parsed = json.loads(line)
    except ValueError:
        return None
    if not isinstance(parsed, dict) or not parsed.get("timestamp"):
        return None

    message = str(parsed.get("message") or "")
    data = parsed.get("data") if isinstance(parsed.get("data"), dict) else {}
    raw_request = data.get("request")
    raw_response = data.get("response")
    log_id = parsed.get("logId")

    try:
        request = None
        if isinstance(raw_request, dict):
            request = RequestDetails(
                url=raw_request.get("path") or raw_request.get("url") or "N/A",
                method=raw_request.get("method") or "N/A",
                body=raw_request.get("body") or {},
                params=raw_request.get("params") or {},
                query=raw_request.get("query") or {},
            )
        response = None
        if isinstance(raw_response, dict):
            response = ResponseDetails(
                status_code=raw_response.get("statusCode") or "N/A",
                body=raw_response.get("body") or {},
            )

        return AppLogEntry(
            timestamp=normalize_timestamp(str(parsed["timestamp"])),
            service=service.value,
            message=message,
            level=_coerce_level(parsed.get("level"), service.value, message),
            log_id=str(log_id) if log_id is not None else None,
            log_file=os.path.basename(log_file),
            request=request,
            response=response,
        )
    except ValidationError as e:
        logger.warning(f"⚠️ Skipping malformed app log line in {log_file}: {e.error_count()} invalid field(s)")
        return None


def parse_nginx_log_line(line: str, log_file: str) -> Optional[NginxLogEntry]:
    match = NGINX_LOG_PATTERN.match(line)
    if not match:
        return None

    return NginxLogEntry(
        service=LogService.NGINX.value,
        level=LogLevel.INFO,
        message=f"Request: {match.group(5)} >>> Status: {match.group(6)}",
        log_file=os.path.basename(log_file),
        remote_addr=match.group(1),
        remote_user=match.group(3),
        timestamp=normalize_timestamp(match.group(4)),
        request=match.group(5),
        status=int(match.group(6)),
        bytes_sent=int(match.group(7)),
        http_referer=match.group(8),
        http_user_agent=match.group(9),
        gzip_ratio=match.group(10),
    )


def parse_console_log_line(line: str, service: LogService, log_file: str) -> Optional[LogEntry]:
    match = WINSTON_LOG_PATTERN.search(line)
    if not match:
        return None

    date_time, log_level, version, message = match.groups()
    return LogEntry(
        timestamp=parse_log_timestamp(date_time),
        level=_coerce_level(log_level, service.value, message),
        message=message,
        service=service.value,
        version=version,
        log_file=os.path.basename(log_file),
    )


def _new_error(message: str, level: LogLevel, service: LogService,
               timestamp: datetime, log_file: str) -> ErrorLogEntry:
    return ErrorLogEntry(
        message=message,
        stack=[],
        full_text=message,
        level=level,
        service=service.value,
        timestamp=timestamp,
        log_file=os.path.basename(log_file),
    )


def parse_error_log_file(log_content: str, service: LogService, log_file: str) -> List[ErrorLogEntry]:
    """Group multi-line console error output into one entry per error.

    A new error starts at a timestamped header line or, failing that, at a
    line containing ``Error:``. Stack frames, JSON detail blocks and other
    non-empty lines attach to the error currently being tracked.
    """
    errors: List[ErrorLogEntry] = []
    current: Optional[ErrorLogEntry] = None
    lines = log_content.split("\n")

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()
        timestamp_match = TIMESTAMP_PATTERN.match(line)

        if timestamp_match:
            date_time_str, log_level, message = timestamp_match.groups()
            if current:
                errors.append(current)
            message = message.strip()
            current = _new_error(
                message,
                _coerce_level(log_level, service.value, message),
                service,
                parse_log_timestamp(date_time_str),
                log_file,
            )
        elif any(marker in line for marker in ERROR_HEADER_MARKERS):
            if current:
                errors.append(current)
            current = _new_error(stripped, LogLevel.ERROR, service, datetime.now(timezone.utc), log_file)
        elif stripped.startswith("at ") and current:
            current.stack.append(stripped)
            current.full_text += "\n" + stripped
        elif stripped.startswith("{") and current:
            details = [stripped]
            # Consume the rest of the JSON block
            j = i + 1
            while j < len(lines) and (
                "}" in lines[j] or lines[j].strip().startswith('"') or ":" in lines[j]
            ):
                details.append(lines[j].strip())
                i = j
                j += 1
            current.details = "\n".join(details)
            current.full_text += "\n" + current.details
        elif stripped and current:
            current.full_text += "\n" + stripped
        elif stripped and not current and not stripped.startswith("at "):
            errors.append(
                _new_error(stripped, LogLevel.ERROR, service, datetime.now(timezone.utc), log_file)
            )
        i += 1

    if current:
        errors.append(current)

    return errors


def parse_log_file(content: str, service: LogService, log_file: str) -> List[LogEntry]:
    """Parse a whole file with the parser matching its service."""
    lines = content.split("\n")

    if service == LogService.APP:
        entries = [parse_app_log_line(line, service, log_file) for line in lines]
    elif service == LogService.NGINX:
        entries = [parse_nginx_log_line(line, log_file) for line in lines]
    elif service == LogService.CONSOLE:
        entries = [parse_console_log_line(line, service, log_file) for line in lines]
    elif service == LogService.CONSOLE_ERROR:
        return list(parse_error_log_file(content, service, log_file))
    else:
        return []

    return [entry for entry in entries if entry is not None]
