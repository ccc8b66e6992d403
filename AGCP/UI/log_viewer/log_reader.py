"""
Log File Reader Module - Initial load and live tailing of the daemon log

Handles:
- Seeding the history with the last N lines of an existing file
- Locating the most recent server start line in the same pass
- Non-blocking follow of new lines as the daemon writes them
- Partial lines, invalid UTF-8, truncation and log rotation
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Tuple

from .log_parser import LogEntry


# Line written by the daemon once it accepts connections
SERVER_START_MARKER = "Server listening"

# Size of chunks to read backwards from end of file
READ_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger(__name__)


def _decode(raw: bytes) -> str:
    return raw.decode('utf-8', errors='replace').rstrip()


def _iter_lines_reversed(handle: BinaryIO, size: int,
                         chunk_size: int = READ_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Yield the lines of a binary file from last to first

    Reads fixed-size chunks walking back from ``size``. The head of each
    chunk may be the tail of a line that started in the previous chunk,
    so it is carried over and joined with the next read.
    """
    remaining = size
    carry = b""
    while remaining > 0:
        step = min(chunk_size, remaining)
        remaining -= step
        handle.seek(remaining)
        block = handle.read(step) + carry
        parts = block.split(b"\n")
        carry = parts.pop(0)
        for part in reversed(parts):
            yield part
    yield carry


def load_tail_and_marker(path: Path, count: int) -> Tuple[List[LogEntry], Optional[str]]:
    """
    Read the last ``count`` lines of a log file and find the last server start

    Only ``count`` lines are held in memory. Older lines are scanned for the
    start marker and discarded, and reading stops once both the tail and the
    marker have been found.

    Args:
        path: Log file to read
        count: Maximum number of entries to return

    Returns:
        Tuple of (entries oldest first, most recent marker line or None).
        A missing or unreadable file gives ([], None).
    """
    tail: List[str] = []
    marker_line: Optional[str] = None

    try:
        with open(path, 'rb') as f:
            size = os.fstat(f.fileno()).st_size
            for raw in _iter_lines_reversed(f, size):
                line = _decode(raw)
                if not line.strip():
                    continue
                if len(tail) < count:
                    tail.append(line)
                if marker_line is None and SERVER_START_MARKER in line:
                    marker_line = line
                if len(tail) >= count and marker_line is not None:
                    break
    except OSError as e:
        logger.debug(f"Initial log load unavailable for {path}: {e}")
        return [], None

    tail.reverse()
    return [LogEntry.from_line(line) for line in tail], marker_line


@dataclass
class _Cursor:
    """Open handle and the byte offset just past the last complete line"""
    handle: BinaryIO
    offset: int
    inode: int
    last_byte: bytes = b""


class LogTailer:
    """
    Incremental reader that follows a single growing log file

    Features:
    - Starts at the end of the file, never backfills history
    - Returns only newline-terminated lines
    - Drops its cursor when the file is deleted, rotated or truncated
      and reopens at the new end on the following poll
    """

    def __init__(self, path: Path):
        """
        Initialize the tailer and try to open the file at its end

        Args:
            path: Path to the log file to follow
        """
        self.path = Path(path)
        self._cursor: Optional[_Cursor] = None
        self.open()

    @property
    def connected(self) -> bool:
        return self._cursor is not None

    def open(self) -> bool:
        """
        Open the file positioned at its current end

        Any existing cursor is replaced.

        Returns:
            True if the file could be opened
        """
        self.close()
        try:
            handle = open(self.path, 'rb')
        except OSError as e:
            logger.debug(f"Log file {self.path} unavailable: {e}")
            return False

        try:
            stat = os.fstat(handle.fileno())
            last_byte = b""
            if stat.st_size > 0:
                handle.seek(stat.st_size - 1)
                last_byte = handle.read(1)
            handle.seek(stat.st_size)
        except OSError as e:
            handle.close()
            logger.debug(f"Could not position {self.path} at end: {e}")
            return False

        self._cursor = _Cursor(
            handle=handle, offset=stat.st_size, inode=stat.st_ino, last_byte=last_byte
        )
        return True

    def close(self) -> None:
        """Drop the cursor, closing its handle"""
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            cursor.handle.close()

    def _file_replaced(self, cursor: _Cursor) -> bool:
        """Check whether the path no longer refers to the data behind the cursor"""
        try:
            stat = os.stat(self.path)
        except OSError:
            logger.debug(f"Log file {self.path} disappeared")
            return True

        if stat.st_ino != cursor.inode:
            logger.debug(f"Log file {self.path} was rotated")
            return True
        if stat.st_size < cursor.offset:
            logger.debug(f"Log file {self.path} was truncated")
            return True

        # Truncated and regrown past the offset
        if cursor.offset > 0:
            try:
                cursor.handle.seek(cursor.offset - 1)
                byte = cursor.handle.read(1)
            except OSError as e:
                logger.debug(f"Could not check {self.path} at offset: {e}")
                return True
            if byte != cursor.last_byte:
                logger.debug(f"Log file {self.path} was truncated")
                return True
        return False

    def poll_new_lines(self) -> List[LogEntry]:
        """
        Read complete lines written since the last call

        Never blocks: only data already in the file is read. A trailing line
        without a newline is left in the file and picked up once completed.

        Returns:
            New LogEntry objects, empty if nothing new or the file is unavailable
        """
        cursor = self._cursor
        if cursor is None:
            self.open()
            return []

        if self._file_replaced(cursor):
            self.close()
            return []

        data = bytearray()
        try:
            cursor.handle.seek(cursor.offset)
            while True:
                chunk = cursor.handle.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                data.extend(chunk)
        except OSError as e:
            logger.warning(f"Error reading {self.path}: {e}")

        end = data.rfind(b"\n")
        if end < 0:
            return []

        cursor.offset += end + 1
        cursor.last_byte = b"\n"

        entries = []
        for raw in data[:end].split(b"\n"):
            line = _decode(bytes(raw))
            if line.strip():
                entries.append(LogEntry.from_line(line))
        return entries
