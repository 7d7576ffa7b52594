from __future__ import annotations

import io
from pathlib import Path

import pytest

from tap_reader.exceptions import StreamContractError
from tap_reader.streams import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    read_stream_lines,
    safe_open,
)


def test_read_stream_lines_splits_chunks_across_lines():
    chunks = [b"TAP version 13\n1..", b"2\n# diag", b"nostic  \n"]

    assert list(read_stream_lines(chunks)) == ["TAP version 13", "1..2", "# diagnostic"]


def test_read_stream_lines_handles_split_multibyte_characters():
    encoded = "# café\n".encode("utf-8")
    chunks = [encoded[:5], encoded[5:6], encoded[6:]]

    assert list(read_stream_lines(chunks)) == ["# café"]


def test_read_stream_lines_keeps_last_line_without_newline():
    assert list(read_stream_lines(io.BytesIO(b"a\nb"))) == ["a", "b"]


def test_read_stream_lines_keeps_blank_lines():
    assert list(read_stream_lines([b"a\n\n   \nb\n"])) == ["a", "", "", "b"]


def test_read_stream_lines_empty_stream():
    assert list(read_stream_lines([])) == []


@pytest.mark.parametrize("chunk", ["text", 42, None])
def test_read_stream_lines_rejects_non_bytes(chunk):
    with pytest.raises(StreamContractError):
        list(read_stream_lines([b"TAP version 13\n", chunk]))


def test_read_stream_lines_raises_on_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        list(read_stream_lines([b"\xff\n"]))


def test_get_max_file_size_defaults(monkeypatch):
    monkeypatch.delenv("TAP_READER_MAX_FILE_SIZE", raising=False)

    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_env(monkeypatch):
    monkeypatch.setenv("TAP_READER_MAX_FILE_SIZE", "2048")

    assert get_max_file_size() == 2048


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_get_max_file_size_rejects_invalid_env(monkeypatch, value):
    monkeypatch.setenv("TAP_READER_MAX_FILE_SIZE", value)

    with pytest.raises(ValueError):
        get_max_file_size()


def test_collect_file_stat_rejects_directories(tmp_path: Path):
    with pytest.raises(IOError):
        collect_file_stat(tmp_path)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "report.tap"
    target.write_bytes(b"TAP version 13\n")
    stat_result = collect_file_stat(target)

    enforce_file_size(stat_result, 100, target)
    with pytest.raises(IOError):
        enforce_file_size(stat_result, 3, target)


def test_safe_open_reports_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        safe_open(tmp_path / "missing.tap")
