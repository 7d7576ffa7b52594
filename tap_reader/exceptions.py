"""Package-specific exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .results import ParseFailure


class TapReaderError(Exception):
    """Base class for tap-reader errors.

    Grammar mismatches are never raised; they are returned as
    `ParseFailure` values. Exceptions cover contract violations and callers
    that explicitly ask for them.
    """


class StreamContractError(TapReaderError, TypeError):
    """Raised when an input stream yields a chunk that is not bytes.

    Args:
        chunk: The offending chunk.
    """

    def __init__(self, chunk: object):
        self.chunk = chunk
        super().__init__(
            f"Expected the TAP stream to yield bytes, received {type(chunk).__name__}"
        )


class TapParseError(TapReaderError, ValueError):
    """Raised when a caller converts a parse failure into an exception.

    Args:
        failure: The failure returned by the grammar.
    """

    def __init__(self, failure: ParseFailure):
        self.failure = failure
        super().__init__(failure.format_error())
