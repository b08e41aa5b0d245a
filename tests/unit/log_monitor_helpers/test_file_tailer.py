"""Tests for incremental log file reading."""

import os

import pytest

from rcon_monitor.log_monitor_helpers import LogFileTailer


def _append(path, data: bytes) -> None:
    with open(path, "ab") as handle:
        handle.write(data)


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "latest.log"
    path.write_bytes(b"old line that must not be replayed\n")
    return path


class TestLogFileTailer:
    def test_starts_at_end_of_file(self, log_file) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()

        assert tailer.poll() == []
        assert tailer.state.byte_offset == log_file.stat().st_size
        tailer.close()

    def test_returns_appended_complete_lines_in_order(self, log_file) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()

        _append(log_file, b"first\r\nsecond\n\nthird")

        assert tailer.poll() == ["first", "second"]
        assert tailer.state.line_buffer == "third"

        _append(log_file, b" continued\n")
        assert tailer.poll() == ["third continued"]
        tailer.close()

    def test_multibyte_character_split_across_reads(self, log_file) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()
        encoded = "café ☕\n".encode("utf-8")

        _append(log_file, encoded[:4])
        assert tailer.poll() == []
        _append(log_file, encoded[4:])

        assert tailer.poll() == ["café ☕"]
        tailer.close()

    def test_truncation_restarts_from_beginning(self, log_file) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()
        _append(log_file, b"before truncation\npartial")
        assert tailer.poll() == ["before truncation"]

        log_file.write_bytes(b"fresh\n")

        assert tailer.poll() == ["fresh"]
        assert tailer.state.line_buffer == ""
        tailer.close()

    def test_replaced_file_is_read_from_start(self, log_file, tmp_path) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()

        rotated = tmp_path / "replacement.log"
        rotated.write_bytes(b"a much longer first line of the new file so size exceeds the old offset\n")
        os.replace(rotated, log_file)

        assert tailer.poll() == ["a much longer first line of the new file so size exceeds the old offset"]
        tailer.close()

    def test_missing_file_during_poll_is_ignored(self, log_file) -> None:
        tailer = LogFileTailer(str(log_file))
        tailer.open_at_end()
        tailer.close()
        log_file.unlink()

        assert tailer.poll() == []

        log_file.write_bytes(b"back again\n")
        assert tailer.poll() == ["back again"]
        tailer.close()

    def test_open_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            LogFileTailer(str(tmp_path / "absent.log")).open_at_end()
