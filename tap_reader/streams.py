"""Input helpers turning byte streams and files into TAP lines."""

from __future__ import annotations

import codecs
import os
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import StreamContractError

MAX_FILE_SIZE_ENV_VAR = "TAP_READER_MAX_FILE_SIZE"


def read_stream_lines(stream: BinaryIO | Iterable[bytes], encoding: str = "utf-8") -> Iterator[str]:
    """Decode a byte stream into lines with trailing whitespace removed.

    Chunks may end in the middle of a line or of a multi-byte character; the
    text is decoded incrementally and split on newlines, keeping the original
    order. A trailing newline does not produce an extra empty line.

    Args:
        stream: Binary file object or any iterable of `bytes` chunks.
        encoding: Text encoding of the stream.

    Yields:
        str: One line at a time, without its line ending or trailing whitespace.

    Raises:
        StreamContractError: If a chunk is not bytes. This aborts the whole read.
        UnicodeDecodeError: If the stream is not valid text in `encoding`.

    Examples:
        list(read_stream_lines([b"TAP version 13\\n1..", b"2  \\n"]))
        # ['TAP version 13', '1..2']
    """
    decoder = codecs.getincrementaldecoder(encoding)()
    pending = ""

    for chunk in stream:
        if not isinstance(chunk, (bytes, bytearray, memoryview)):
            raise StreamContractError(chunk)
        pending += decoder.decode(bytes(chunk))
        *complete_lines, pending = pending.split("\n")
        for line in complete_lines:
            yield line.rstrip()

    pending += decoder.decode(b"", final=True)
    if pending:
        yield pending.rstrip()


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["TAP_READER_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_open(filepath: Path) -> BinaryIO:
    """Open a file for binary reading with consistent error handling.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_open(Path("report.tap")) as handle:
            lines = list(read_stream_lines(handle))
    """
    try:
        return open(filepath, "rb")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error
