"""
Log Monitor Module - Session wiring of loader, tailer and history

The dashboard driver calls refresh() on every poll tick. All work happens on
the caller's thread and returns immediately.
"""
import logging
from pathlib import Path
from typing import List, Optional

from .log_history import MAX_ENTRIES, LogHistory
from .log_parser import LogEntry
from .log_reader import LogTailer, load_tail_and_marker
from .log_stats import find_daemon_start_time, parse_daemon_start


class LogMonitor:
    """
    Live view of the daemon log for one dashboard session

    Attributes:
        path: Log file being followed
        history: Bounded history shown by the log view
        daemon_start_time: Epoch seconds of the latest server start, if known
    """

    def __init__(self, path: Path, initial_lines: int = 500, capacity: int = MAX_ENTRIES):
        self.path = Path(path)
        self.initial_lines = initial_lines
        self.history = LogHistory(capacity=capacity)
        self.daemon_start_time: Optional[int] = None
        self.tailer: Optional[LogTailer] = None
        self.logger = logging.getLogger(__name__)

    def start(self) -> None:
        """Seed the history from the end of the file and begin following it"""
        entries, marker_line = load_tail_and_marker(self.path, self.initial_lines)
        self.history.append_batch(entries)
        if marker_line is not None:
            self.daemon_start_time = parse_daemon_start(marker_line)

        self.tailer = LogTailer(self.path)
        self.logger.info(
            f"Loaded {len(entries)} log lines from {self.path} "
            f"(following: {self.tailer.connected})"
        )

    def refresh(self) -> List[LogEntry]:
        """
        Pull new lines into the history

        Returns:
            The entries appended during this call
        """
        if self.tailer is None:
            self.start()
            return []

        new_entries = self.tailer.poll_new_lines()
        if not new_entries:
            return []

        self.history.append_batch(new_entries)

        # Only move forward: a restart produces a newer start line
        new_start = find_daemon_start_time(new_entries)
        if new_start is not None and (
            self.daemon_start_time is None or new_start > self.daemon_start_time
        ):
            self.logger.info("Daemon restart detected in log")
            self.daemon_start_time = new_start

        return new_entries

    def close(self) -> None:
        if self.tailer is not None:
            self.tailer.close()
