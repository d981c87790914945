"""Follow a log file the way ``tail -F`` does, without blocking."""
import logging
import os
from typing import List, Optional, TextIO, Tuple

logger = logging.getLogger(__name__)


class LogTail:
    def __init__(self, file_path: str, from_start: bool = False):
        self.file_path = file_path
        self._file: Optional[TextIO] = None
        self._identity: Optional[Tuple[int, int]] = None
        self._partial = ""
        self._open(from_start)

    def _open(self, from_start: bool) -> None:
        self._file = open(self.file_path, "r", encoding="utf-8", errors="replace")
        stat = os.fstat(self._file.fileno())
        self._identity = (stat.st_dev, stat.st_ino)
        if not from_start:
            self._file.seek(0, os.SEEK_END)
        self._partial = ""

    def _follow_rotation(self) -> str:
        """Reopen or rewind after rotation.

        Returns whatever was still unread in a file that was renamed away.
        """
        stat = os.stat(self.file_path)

        if (stat.st_dev, stat.st_ino) != self._identity:
            # Renamed away and recreated: finish the old file, then follow the new one
            logger.info(f"🔄 Log file rotated, following the new file: {self.file_path}")
            remainder = self._partial + self._file.read()
            self._file.close()
            self._file = None
            self._open(from_start=True)
            return remainder

        if stat.st_size < self._file.tell():
            # Truncated in place (copytruncate)
            logger.info(f"🔄 Log file truncated, restarting from the top: {self.file_path}")
            self._file.seek(0)
            self._partial = ""
        return ""

    def read_lines(self) -> List[str]:
        """Return the complete lines appended since the last call."""
        if self._file is None:
            return []

        try:
            remainder = self._follow_rotation()
        except OSError as e:
            logger.warning(f"⚠️ Could not follow {self.file_path}: {e}")
            return []

        lines: List[str] = []
        if remainder:
            lines.extend(line.rstrip("\r") for line in remainder.split("\n") if line)

        chunk = self._file.read()
        if chunk:
            data = self._partial + chunk
            new_lines = data.split("\n")
            self._partial = new_lines.pop()
            lines.extend(line.rstrip("\r") for line in new_lines)
        return lines

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
