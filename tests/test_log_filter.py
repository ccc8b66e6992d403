import pytest

from AGCP.UI.log_viewer.log_filter import LogFilter, known_accounts
from AGCP.UI.log_viewer.log_parser import LogEntry, LogLevel


@pytest.fixture
def entries():
    return [
        LogEntry.from_line("2026-02-05T10:00:00.1Z  INFO Model used model=m1 account=a@x.io"),
        LogEntry.from_line("2026-02-05T10:00:01.1Z  WARN Rate limited account=b@x.io"),
        LogEntry.from_line("2026-02-05T10:00:02.1Z ERROR Upstream failed"),
        LogEntry.from_line("2026-02-05T10:00:03.1Z DEBUG polling quota"),
    ]


def test_default_filter_shows_everything(entries):
    log_filter = LogFilter()
    assert not log_filter.is_active
    assert log_filter.apply(entries) == [0, 1, 2, 3]


def test_level_toggle(entries):
    log_filter = LogFilter()
    log_filter.toggle_level(LogLevel.DEBUG)
    assert log_filter.is_active
    assert log_filter.apply(entries) == [0, 1, 2]


def test_account_filter(entries):
    log_filter = LogFilter()
    log_filter.set_account("b@x.io")
    assert log_filter.apply(entries) == [1]


def test_search_is_case_insensitive(entries):
    log_filter = LogFilter()
    log_filter.set_search("  UPSTREAM ")
    assert log_filter.apply(entries) == [2]


def test_reset(entries):
    log_filter = LogFilter()
    log_filter.toggle_level(LogLevel.INFO)
    log_filter.set_search("quota")
    log_filter.reset()
    assert not log_filter.is_active
    assert len(log_filter.apply(entries)) == 4


def test_known_accounts(entries):
    assert known_accounts(entries) == ["a@x.io", "b@x.io"]
