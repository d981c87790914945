"""Log Stream Service - Live log tailing delivered as Server-Sent Events."""
import asyncio
import json
import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from admin_gateway.config import settings
from admin_gateway.domain.entities.log_entry import LogEntry, LogLevel, LogService
from admin_gateway.infrastructure.logs.log_file_client import LogFileClient
from admin_gateway.infrastructure.logs.log_tail import LogTail
from admin_gateway.utils.log_filters import determine_log_level

logger = logging.getLogger(__name__)

ERROR_START_PATTERN = re.compile(r"(?:^|\s)(?:[A-Z][a-zA-Z]*)?Error:|\bException:")
STACK_TRACE_LINE_PATTERN = re.compile(r"^\s+at\s|^\s*\{|^\s*\}")
STACK_TRACE_END_PATTERN = re.compile(r"^\s*\}\s*$")


def _is_complete_json(line: str) -> bool:
    try:
        json.loads(line)
    except ValueError:
        return False
    return True


def _is_stack_trace_line(line: str) -> bool:
    return bool(
        STACK_TRACE_LINE_PATTERN.search(line)
        or "node:" in line
        or "code:" in line
        or "help:" in line
    )


def format_sse(entry: LogEntry) -> str:
    return f"data: {entry.model_dump_json()}\n\n"


class ErrorLineBuffer:
    """Turns the raw lines of one log file into entries.

    An error header and the stack-trace lines that follow it are collected
    into a single ERROR entry. The group is emitted when a line that does not
    belong to it arrives, when a closing ``}`` line ends it, or once it has
    been idle for ``timeout`` seconds (see ``flush_if_idle``).
    """

    def __init__(self, log_key: str, log_path: str, service: str, timeout: float = 0.5):
        self.log_key = log_key
        self.log_file = os.path.basename(log_path)
        self.service = service
        self.timeout = timeout
        self._lines: List[str] = []
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return bool(self._lines)

    def _entry(self, message: str, level: LogLevel) -> LogEntry:
        return LogEntry(
            timestamp=datetime.now(timezone.utc),
            service=self.service,
            message=message,
            level=level,
            log_file=self.log_file,
        )

    def flush(self) -> List[LogEntry]:
        if not self._lines:
            return []
        entry = self._entry("\n".join(self._lines), LogLevel.ERROR)
        self._lines = []
        self._deadline = None
        return [entry]

    def flush_if_idle(self, now: Optional[float] = None) -> List[LogEntry]:
        now = time.monotonic() if now is None else now
        if self._deadline is not None and now >= self._deadline:
            return self.flush()
        return []

    def feed(self, line: str, now: Optional[float] = None) -> List[LogEntry]:
        """Consume one raw line and return the entries ready to be sent."""
        now = time.monotonic() if now is None else now

        if _is_complete_json(line):
            return self.flush() + [self._entry(line, determine_log_level(self.log_key, line))]

        if ERROR_START_PATTERN.search(line):
            ready = self.flush()
            self._lines = [line]
            self._deadline = now + self.timeout
            return ready

        if self._lines and _is_stack_trace_line(line):
            self._lines.append(line)
            self._deadline = now + self.timeout
            if STACK_TRACE_END_PATTERN.match(line):
                return self.flush()
            return []

        ready = self.flush()
        ready.append(self._entry(line, determine_log_level(self.log_key, line)))
        return ready


class LogStreamService:
    def __init__(self, client: LogFileClient, poll_interval: Optional[float] = None,
                 error_buffer_timeout: Optional[float] = None):
        self.client = client
        self.poll_interval = settings.STREAM_POLL_INTERVAL if poll_interval is None else poll_interval
        self.error_buffer_timeout = (
            settings.STREAM_ERROR_BUFFER_TIMEOUT if error_buffer_timeout is None else error_buffer_timeout
        )

    def _system_entry(self, message: str, level: LogLevel, service: str,
                      log_file: Optional[str] = None) -> LogEntry:
        return LogEntry(
            timestamp=datetime.now(timezone.utc),
            service=service,
            message=message,
            level=level,
            log_file=log_file,
        )

    async def stream(
        self,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> AsyncIterator[str]:
        """Yield SSE frames for every line appended to the configured log files.

        Missing files are reported once as WARN entries, followed by a status
        entry listing which logs are being followed.
        """
        log_paths = self.client.get_log_paths_config()
        service_mapping = self.client.get_service_mapping()

        tails: Dict[str, LogTail] = {}
        buffers: Dict[str, ErrorLineBuffer] = {}
        available: List[str] = []
        unavailable: List[str] = []

        try:
            for log_key, log_path in log_paths.items():
                service = service_mapping.get(log_key, LogService.SYSTEM).value
                # Blocking file I/O stays off the event loop
                if await run_in_threadpool(self.client.file_exists, log_path):
                    try:
                        tails[log_key] = await run_in_threadpool(LogTail, log_path)
                    except OSError as e:
                        logger.error(f"❌ Error setting up tail for {log_key}: {e}")
                        continue
                    buffers[log_key] = ErrorLineBuffer(log_key, log_path, service, self.error_buffer_timeout)
                    available.append(log_key)
                else:
                    unavailable.append(log_key)
                    yield format_sse(self._system_entry(
                        f"Log file not found: {log_path}",
                        LogLevel.WARN,
                        service,
                        os.path.basename(log_path),
                    ))

            logger.info(
                f"📡 Streaming logs: Available: [{', '.join(available)}], "
                f"Unavailable: [{', '.join(unavailable)}]"
            )

            status = f"Log streaming started. Available logs: [{', '.join(available)}]"
            if unavailable:
                status += f", Unavailable logs: [{', '.join(unavailable)}]"
            yield format_sse(self._system_entry(status, LogLevel.INFO, LogService.SYSTEM.value))

            while True:
                if is_disconnected is not None and await is_disconnected():
                    logger.info("🔌 Log stream client disconnected")
                    break

                for log_key, tail in tails.items():
                    buffer = buffers[log_key]
                    for line in await run_in_threadpool(tail.read_lines):
                        for entry in buffer.feed(line):
                            yield format_sse(entry)
                    for entry in buffer.flush_if_idle():
                        yield format_sse(entry)

                await asyncio.sleep(self.poll_interval)
        finally:
            for tail in tails.values():
                tail.close()
