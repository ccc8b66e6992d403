"""
Log History Module - Bounded in-memory log buffer

Handles:
- Retaining the most recent log entries in file order
- Oldest-first eviction, one entry per insert
- Snapshot access for rendering and filtering
"""
from collections import deque
from typing import Iterable, Iterator, List

from .log_parser import LogEntry


# Maximum number of log entries to keep in memory
MAX_ENTRIES = 1000


class LogHistory:
    """
    Ordered, capacity-bounded sequence of LogEntry objects

    Entries are appended at the back. Whenever an append pushes the length
    past the capacity, exactly one entry is dropped from the front, so a
    burst of new lines rolls the window forward in arrival order.
    """

    def __init__(self, capacity: int = MAX_ENTRIES, entries: Iterable[LogEntry] = ()):
        """
        Initialize the history

        Args:
            capacity: Maximum number of entries retained
            entries: Optional seed entries, oldest first
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque = deque()
        self.append_batch(entries)

    def append(self, entry: LogEntry) -> None:
        """Insert an entry at the back, evicting the oldest if over capacity"""
        self._entries.append(entry)
        if len(self._entries) > self.capacity:
            self._entries.popleft()

    def append_batch(self, entries: Iterable[LogEntry]) -> None:
        """Append each entry in order"""
        for entry in entries:
            self.append(entry)

    def snapshot(self) -> List[LogEntry]:
        """Return a copy of the current entries, oldest first"""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> LogEntry:
        return self._entries[index]
