"""
Log Parser Module - Classification of AGCP daemon log lines

Handles:
- ANSI colour code stripping
- Log level identification (DEBUG, INFO, WARN, ERROR)
- Request completion detection with timestamp extraction
- Model, account and duration extraction for dashboard statistics

The daemon writes tracing-style lines, for example:
    2026-02-05T21:25:01.034804Z  INFO Request completed method=POST path=/v1/messages duration_ms=812
"""
import calendar
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# Colour escape sequences emitted when the daemon logs to a terminal
ANSI_PATTERN = re.compile(r'\x1b\[[0-9;]*m')

REQUEST_PATTERN = re.compile(
    r'(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.\d+Z\s+INFO\s+Request completed'
    r'.*path=(/v1)?/messages'
)
SERVER_START_PATTERN = re.compile(
    r'(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.\d+Z\s+INFO\s+Server listening'
)
MODEL_USED_PATTERN = re.compile(r'INFO\s+Model used\s+model=(\S+)')
ACCOUNT_PATTERN = re.compile(r'account=(\S+)')
DURATION_PATTERN = re.compile(r'duration_ms=(\d+)')

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"

    @property
    def color(self) -> str:
        """Get color representation for this log level"""
        colors = {
            LogLevel.DEBUG: "blue",
            LogLevel.INFO: "green",
            LogLevel.WARN: "yellow",
            LogLevel.ERROR: "red",
            LogLevel.UNKNOWN: "white",
        }
        return colors.get(self, "white")

    @classmethod
    def classify(cls, line: str) -> "LogLevel":
        """
        Derive the level from a cleaned log line

        The level keyword sits between the timestamp and the message with
        variable padding, so a keyword match is used rather than a column.

        Args:
            line: Log line with ANSI codes already removed

        Returns:
            Matching LogLevel, UNKNOWN when no keyword is present
        """
        if " DEBUG " in line:
            return cls.DEBUG
        if " WARN " in line or "WARN " in line:
            return cls.WARN
        if " ERROR " in line or "ERROR " in line:
            return cls.ERROR
        if " INFO " in line or "INFO " in line:
            return cls.INFO
        return cls.UNKNOWN


def strip_ansi(line: str) -> str:
    """Remove terminal colour codes from a line"""
    return ANSI_PATTERN.sub('', line)


def parse_timestamp(timestamp_str: str) -> Optional[int]:
    """
    Parse a "YYYY-MM-DDTHH:MM:SS" UTC timestamp into epoch seconds

    Returns:
        Seconds since the epoch, or None if the string is malformed
    """
    try:
        parsed = time.strptime(timestamp_str, TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return calendar.timegm(parsed)


@dataclass(frozen=True)
class LogEntry:
    """One daemon log line plus the metadata derived from it"""
    raw_text: str
    level: LogLevel
    timestamp_secs: Optional[int] = None
    is_request: bool = False
    account: Optional[str] = None
    model: Optional[str] = None
    duration_ms: Optional[int] = None

    @classmethod
    def from_line(cls, line: str) -> "LogEntry":
        """
        Build an entry from a raw log line

        Args:
            line: Line as read from the file, possibly with ANSI codes

        Returns:
            LogEntry with level and request metadata filled in
        """
        clean = strip_ansi(line).rstrip()

        timestamp_secs = None
        is_request = False
        duration_ms = None
        request_match = REQUEST_PATTERN.search(clean)
        if request_match:
            is_request = True
            timestamp_secs = parse_timestamp(request_match.group(1))
            duration_match = DURATION_PATTERN.search(clean)
            if duration_match:
                duration_ms = int(duration_match.group(1))

        account_match = ACCOUNT_PATTERN.search(clean)
        model_match = MODEL_USED_PATTERN.search(clean)

        return cls(
            raw_text=clean,
            level=LogLevel.classify(clean),
            timestamp_secs=timestamp_secs,
            is_request=is_request,
            account=account_match.group(1) if account_match else None,
            model=model_match.group(1) if model_match else None,
            duration_ms=duration_ms,
        )

    def __str__(self) -> str:
        return self.raw_text

    def to_dict(self) -> dict:
        """Convert to dictionary for export"""
        return {
            'raw_text': self.raw_text,
            'level': self.level.value,
            'timestamp_secs': self.timestamp_secs,
            'is_request': self.is_request,
            'account': self.account,
            'model': self.model,
            'duration_ms': self.duration_ms,
        }
