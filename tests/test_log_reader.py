"""
Unit tests for initial log loading and live tailing
"""
import io
import os

import pytest

from AGCP.UI.log_viewer.log_reader import (
    SERVER_START_MARKER,
    LogTailer,
    _iter_lines_reversed,
    load_tail_and_marker
)


def write(path, data):
    mode = "ab" if isinstance(data, bytes) else "a"
    with open(path, mode) as f:
        f.write(data)


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "agcp.log"


@pytest.fixture
def tailer_factory():
    tailers = []

    def make(path):
        tailer = LogTailer(path)
        tailers.append(tailer)
        return tailer

    yield make

    for tailer in tailers:
        tailer.close()


class TestLoadTailAndMarker:
    """Test load_tail_and_marker"""

    def test_last_five_of_twelve_with_marker(self, log_path):
        """Test lines 8-12 are returned and the marker three lines from the end is found"""
        lines = [f"line {i}" for i in range(1, 13)]
        lines[9] = f"2026-02-05T12:39:09.607047Z  INFO {SERVER_START_MARKER} address=127.0.0.1:8080"
        write(log_path, "\n".join(lines) + "\n")

        entries, marker = load_tail_and_marker(log_path, 5)

        assert [e.raw_text for e in entries] == lines[7:]
        assert marker == lines[9]

    def test_most_recent_marker_wins(self, log_path):
        """Test the latest of several markers is returned"""
        write(log_path, f"a {SERVER_START_MARKER} 1\nb\nc {SERVER_START_MARKER} 2\nd\n")
        _, marker = load_tail_and_marker(log_path, 1)
        assert marker == f"c {SERVER_START_MARKER} 2"

    def test_marker_outside_tail_window(self, log_path):
        """Test the marker is found even when older than the returned lines"""
        lines = [f"{SERVER_START_MARKER} first"] + [f"line {i}" for i in range(2, 13)]
        write(log_path, "\n".join(lines) + "\n")

        entries, marker = load_tail_and_marker(log_path, 5)

        assert len(entries) == 5
        assert marker == lines[0]

    def test_count_larger_than_file(self, log_path):
        """Test all lines come back when count exceeds the line count"""
        write(log_path, "one\ntwo\nthree")
        entries, marker = load_tail_and_marker(log_path, 100)
        assert [e.raw_text for e in entries] == ["one", "two", "three"]
        assert marker is None

    def test_blank_lines_skipped(self, log_path):
        write(log_path, "one\n\n   \ntwo\n\n")
        entries, _ = load_tail_and_marker(log_path, 10)
        assert [e.raw_text for e in entries] == ["one", "two"]

    def test_missing_file(self, log_path):
        """Test a missing file gives empty results instead of an error"""
        assert load_tail_and_marker(log_path, 10) == ([], None)

    def test_empty_file(self, log_path):
        log_path.touch()
        assert load_tail_and_marker(log_path, 10) == ([], None)

    def test_zero_count_still_finds_marker(self, log_path):
        write(log_path, f"{SERVER_START_MARKER}\nother\n")
        entries, marker = load_tail_and_marker(log_path, 0)
        assert entries == []
        assert marker == SERVER_START_MARKER

    def test_invalid_utf8_replaced(self, log_path):
        write(log_path, b"ok\n\xff\xfe broken\n")
        entries, _ = load_tail_and_marker(log_path, 10)
        assert entries[0].raw_text == "ok"
        assert "�" in entries[1].raw_text

    def test_crlf_line_endings(self, log_path):
        write(log_path, b"one\r\ntwo\r\n")
        entries, _ = load_tail_and_marker(log_path, 10)
        assert [e.raw_text for e in entries] == ["one", "two"]


def test_reverse_lines_across_chunk_boundaries():
    """Test lines split across small chunks are reassembled"""
    data = b"alpha\nbravo\ncharlie\ndelta"
    lines = list(_iter_lines_reversed(io.BytesIO(data), len(data), chunk_size=4))
    assert lines == [b"delta", b"charlie", b"bravo", b"alpha"]


def test_reverse_lines_trailing_newline():
    data = b"alpha\nbravo\n"
    lines = list(_iter_lines_reversed(io.BytesIO(data), len(data), chunk_size=3))
    assert lines == [b"", b"bravo", b"alpha"]


class FailingHandle:
    """Handle wrapper that fails after the first read"""

    def __init__(self, handle):
        self._handle = handle
        self.reads = 0

    def seek(self, offset):
        return self._handle.seek(offset)

    def read(self, size):
        self.reads += 1
        if self.reads > 1:
            raise OSError("device went away")
        return self._handle.read(size)

    def close(self):
        self._handle.close()


class TestLogTailer:
    """Test LogTailer follow behaviour"""

    def test_starts_at_end_of_existing_file(self, log_path, tailer_factory):
        """Test existing lines are not returned"""
        write(log_path, "old 1\nold 2\n")
        tailer = tailer_factory(log_path)
        assert tailer.connected
        assert tailer.poll_new_lines() == []

    def test_returns_new_lines(self, log_path, tailer_factory):
        write(log_path, "old\n")
        tailer = tailer_factory(log_path)
        write(log_path, "new 1\nnew 2\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["new 1", "new 2"]

    def test_repeated_polls_without_writes(self, log_path, tailer_factory):
        """Test two polls with no new data both return nothing"""
        write(log_path, "old\n")
        tailer = tailer_factory(log_path)
        write(log_path, "new\n")
        tailer.poll_new_lines()
        assert tailer.poll_new_lines() == []
        assert tailer.poll_new_lines() == []

    def test_partial_line_held_until_complete(self, log_path, tailer_factory):
        """Test a line without a newline is withheld, then returned whole"""
        log_path.touch()
        tailer = tailer_factory(log_path)

        write(log_path, "complete\npart")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["complete"]
        assert tailer.poll_new_lines() == []

        write(log_path, "ial line\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["partial line"]

    def test_blank_lines_discarded(self, log_path, tailer_factory):
        log_path.touch()
        tailer = tailer_factory(log_path)
        write(log_path, "\n  \nvalue\n\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["value"]

    def test_invalid_utf8(self, log_path, tailer_factory):
        log_path.touch()
        tailer = tailer_factory(log_path)
        write(log_path, b"\xff bad bytes\n")
        entries = tailer.poll_new_lines()
        assert len(entries) == 1
        assert entries[0].raw_text.startswith("�")

    def test_missing_file_reopens_at_end(self, log_path, tailer_factory):
        """Test lines present before the first successful open are never surfaced"""
        tailer = tailer_factory(log_path)
        assert not tailer.connected
        assert tailer.poll_new_lines() == []

        write(log_path, "written before open\n")
        assert tailer.poll_new_lines() == []
        assert tailer.connected

        write(log_path, "written after open\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["written after open"]

    def test_truncation_drops_cursor(self, log_path, tailer_factory):
        """Test a truncated file is reopened at its new end"""
        write(log_path, "a fairly long first line\n")
        tailer = tailer_factory(log_path)
        write(log_path, "another line\n")
        tailer.poll_new_lines()

        with open(log_path, "w") as f:
            f.write("short\n")

        assert tailer.poll_new_lines() == []
        assert not tailer.connected
        assert tailer.poll_new_lines() == []
        assert tailer.connected

        write(log_path, "after truncate\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["after truncate"]

    def test_truncation_then_regrowth_drops_cursor(self, log_path, tailer_factory):
        """Test a file rewritten past the old offset is not read mid-line"""
        write(log_path, "0123456789\n")
        tailer = tailer_factory(log_path)

        with open(log_path, "w") as f:
            f.write("new line one\nnew line two\n")

        assert tailer.poll_new_lines() == []
        assert not tailer.connected
        tailer.poll_new_lines()

        write(log_path, "new line three\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["new line three"]

    def test_open_mid_line_keeps_following(self, log_path, tailer_factory):
        """Test a file opened after a partial line is not mistaken for truncation"""
        write(log_path, "complete\npartial")
        tailer = tailer_factory(log_path)

        write(log_path, " rest\nnext\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == [" rest", "next"]
        assert tailer.connected

    def test_rotation_drops_cursor(self, log_path, tailer_factory, tmp_path):
        """Test a file replaced by rotation is not read from the old offset"""
        write(log_path, "before rotation\n")
        tailer = tailer_factory(log_path)

        rotated = tmp_path / "agcp.log.new"
        write(rotated, "fresh file content that is long enough\n")
        os.replace(rotated, log_path)

        assert tailer.poll_new_lines() == []
        assert not tailer.connected
        tailer.poll_new_lines()

        write(log_path, "after rotation\n")
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["after rotation"]

    def test_deleted_file(self, log_path, tailer_factory):
        """Test deletion degrades silently to no cursor"""
        write(log_path, "x\n")
        tailer = tailer_factory(log_path)
        os.remove(log_path)

        assert tailer.poll_new_lines() == []
        assert not tailer.connected
        assert tailer.poll_new_lines() == []
        assert not tailer.connected

    def test_read_error_returns_lines_already_read(self, log_path, tailer_factory):
        """Test an I/O error mid-read keeps the complete lines read so far"""
        log_path.touch()
        tailer = tailer_factory(log_path)
        write(log_path, "first\nsecond\n")

        tailer._cursor.handle = FailingHandle(tailer._cursor.handle)
        assert [e.raw_text for e in tailer.poll_new_lines()] == ["first", "second"]

    def test_close(self, log_path, tailer_factory):
        log_path.touch()
        tailer = tailer_factory(log_path)
        tailer.close()
        assert not tailer.connected
