"""
Log Filter Module - Level, account and text filtering over the history
"""
from typing import Dict, Iterable, List, Optional

from .log_parser import LogEntry, LogLevel


class LogFilter:
    """
    Filter state for the log view

    Features:
    - Per-level toggles (all levels shown by default)
    - Optional account restriction
    - Case-insensitive search text
    """

    def __init__(self):
        self.levels: Dict[LogLevel, bool] = {level: True for level in LogLevel}
        self.account: Optional[str] = None
        self.search_text: str = ""

    @property
    def is_active(self) -> bool:
        """True when any criterion would hide entries"""
        return (
            not all(self.levels.values())
            or self.account is not None
            or bool(self.search_text)
        )

    def toggle_level(self, level: LogLevel) -> None:
        self.levels[level] = not self.levels[level]

    def set_account(self, account: Optional[str]) -> None:
        self.account = account

    def set_search(self, text: str) -> None:
        self.search_text = text.strip()

    def reset(self) -> None:
        """Show everything again"""
        self.levels = {level: True for level in LogLevel}
        self.account = None
        self.search_text = ""

    def matches(self, entry: LogEntry) -> bool:
        """
        Check an entry against every active criterion

        Args:
            entry: Entry to test

        Returns:
            True if the entry should be displayed
        """
        if not self.levels.get(entry.level, True):
            return False
        if self.account is not None and entry.account != self.account:
            return False
        if self.search_text and self.search_text.lower() not in entry.raw_text.lower():
            return False
        return True

    def apply(self, entries: Iterable[LogEntry]) -> List[int]:
        """Return the indices of matching entries, in order"""
        return [idx for idx, entry in enumerate(entries) if self.matches(entry)]


def known_accounts(entries: Iterable[LogEntry]) -> List[str]:
    """Sorted distinct accounts mentioned in the entries"""
    return sorted({entry.account for entry in entries if entry.account})
