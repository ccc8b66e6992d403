"""
Log Viewer Package - Data model behind the dashboard log view

This package provides:
- Log line classification (level, requests, models, accounts)
- A bounded log history with oldest-first eviction
- Initial tail loading with server start detection
- Non-blocking live tailing of the daemon log
- Filtering and dashboard statistics

Package Structure:
- log_parser: Line parsing (LogEntry, LogLevel)
- log_history: Bounded buffer (LogHistory)
- log_reader: File reading (LogTailer, load_tail_and_marker)
- log_filter: Level/account/search filtering (LogFilter)
- log_stats: Request counts, rates and uptime
- log_monitor: Session orchestration (LogMonitor)
"""

from .log_parser import LogEntry, LogLevel
from .log_history import MAX_ENTRIES, LogHistory
from .log_reader import SERVER_START_MARKER, LogTailer, load_tail_and_marker
from .log_filter import LogFilter, known_accounts
from .log_monitor import LogMonitor

__all__ = [
    # Data models
    'LogEntry',
    'LogLevel',

    # Core components
    'LogHistory',
    'LogTailer',
    'LogFilter',
    'LogMonitor',
    'load_tail_and_marker',
    'known_accounts',

    # Constants
    'MAX_ENTRIES',
    'SERVER_START_MARKER',
]
