"""
Log Statistics Module - Dashboard figures derived from the log history

Handles:
- Request and per-model usage counts
- Requests-per-second history for the last minute
- Average response time and requests per minute
- Daemon start time and uptime
"""
import time
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .log_parser import SERVER_START_PATTERN, LogEntry, parse_timestamp, strip_ansi


# Width of the rate history window in seconds
RATE_WINDOW = 60


@dataclass(frozen=True)
class ModelUsage:
    model: str
    requests: int


def current_time_secs() -> int:
    return int(time.time())


def count_requests(entries: Iterable[LogEntry]) -> Tuple[int, List[ModelUsage]]:
    """
    Count completed requests and "Model used" lines per model

    Returns:
        Tuple of (total requests, usage sorted by count desc then model name)
    """
    total = 0
    models: Counter = Counter()
    for entry in entries:
        if entry.is_request:
            total += 1
        if entry.model:
            models[entry.model] += 1

    usage = [ModelUsage(model=model, requests=count) for model, count in models.items()]
    usage.sort(key=lambda u: (-u.requests, u.model))
    return total, usage


def build_rate_history(entries: Iterable[LogEntry], now: int) -> List[int]:
    """
    Requests per second over the last minute

    Args:
        entries: Log entries to scan
        now: Current time in epoch seconds

    Returns:
        RATE_WINDOW counts, oldest second first. All zeros when now is 0.
    """
    if now == 0:
        return [0] * RATE_WINDOW

    counts: Counter = Counter()
    for entry in entries:
        ts = entry.timestamp_secs
        if entry.is_request and ts is not None and now - RATE_WINDOW < ts <= now:
            counts[ts] += 1

    start = now - (RATE_WINDOW - 1)
    return [counts.get(start + i, 0) for i in range(RATE_WINDOW)]


def average_response_time(entries: Iterable[LogEntry]) -> Optional[int]:
    """Mean duration_ms of completed requests, None if there are none"""
    durations = [
        entry.duration_ms for entry in entries
        if entry.is_request and entry.duration_ms is not None
    ]
    if not durations:
        return None
    return sum(durations) // len(durations)


def requests_per_minute(entries: Iterable[LogEntry], now: int) -> int:
    one_min_ago = now - 60
    return sum(
        1 for entry in entries
        if entry.is_request and entry.timestamp_secs is not None
        and entry.timestamp_secs >= one_min_ago
    )


def parse_daemon_start(line: str) -> Optional[int]:
    """Extract the start time from a raw "Server listening" line"""
    match = SERVER_START_PATTERN.search(strip_ansi(line))
    if not match:
        return None
    return parse_timestamp(match.group(1))


def find_daemon_start_time(entries: Iterable[LogEntry]) -> Optional[int]:
    """Start time of the most recent "Server listening" entry"""
    for entry in reversed(list(entries)):
        start = parse_daemon_start(entry.raw_text)
        if start is not None:
            return start
    return None


def format_uptime(start: Optional[int], now: int) -> str:
    """Format elapsed time as HH:MM:SS"""
    if start is None or now < start:
        return "00:00:00"
    elapsed = now - start
    hours, rest = divmod(elapsed, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
