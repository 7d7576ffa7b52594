"""Immutable line cursors used by the parsers.

A `Context` points at one line of a fixed line sequence. An
`IndentedContext` wraps any other context and exposes only the lines that
carry a given indentation, with that indentation removed, so an indented
block can be parsed as if it were top-level text. The block ends where the
indentation drops below the required width.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from .streams import read_stream_lines


@dataclass(frozen=True)
class Position:
    """Line and column reported for diagnostics.

    Attributes:
        line: Zero-based line index.
        column: Zero-based column.
    """

    line: int
    column: int


class LineContext(Protocol):
    """Capabilities shared by every cursor implementation."""

    def log_state(self) -> Position: ...

    def done(self) -> bool: ...

    def get_line(self) -> str: ...

    def advance_line(self, lines: int = 1) -> LineContext: ...

    def iter_lines(self) -> Iterator[LineContext]: ...


@dataclass(frozen=True)
class Context:
    """Cursor over an immutable tuple of lines.

    `line` may equal ``len(source)``, which marks the cursor as exhausted.

    Attributes:
        source: Lines being parsed, trailing whitespace already stripped.
        line: Zero-based index of the current line.
        column: Column within the current line; reset to 0 on every advance.

    Examples:
        ctx = Context(("TAP version 13", "1..2"))
        ctx.advance_line(1).get_line()  # '1..2'
        ctx.get_line()  # 'TAP version 13', the original is unchanged
    """

    source: tuple[str, ...]
    line: int = 0
    column: int = 0

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> Context:
        return cls(tuple(lines))

    @classmethod
    def from_stream(cls, stream: BinaryIO | Iterable[bytes]) -> Context:
        """Buffer a byte stream into a context positioned on its first line.

        Raises:
            StreamContractError: If the stream yields something other than bytes.
        """
        return cls(tuple(read_stream_lines(stream)))

    def log_state(self) -> Position:
        return Position(line=self.line, column=self.column)

    def done(self) -> bool:
        return self.line >= len(self.source)

    def get_line(self) -> str:
        """Return the current line.

        Raises:
            EOFError: If the cursor is exhausted.
        """
        if self.done():
            raise EOFError(f"No line at index {self.line}, the input has {len(self.source)} lines")
        return self.source[self.line]

    def advance_line(self, lines: int = 1) -> Context:
        """Return a new cursor `lines` lines further, clamped to the end of input."""
        if lines < 0:
            raise ValueError(f"Cannot advance by a negative number of lines ({lines})")
        return Context(self.source, min(self.line + lines, len(self.source)), 0)

    def iter_lines(self) -> Iterator[Context]:
        for index in range(self.line, len(self.source)):
            yield Context(self.source, index, 0)


@dataclass(frozen=True)
class IndentedContext:
    """View of a parent context restricted to lines indented by `indent_level` spaces.

    Attributes:
        parent: Context being wrapped; may itself be an `IndentedContext`.
        indent_level: Number of leading spaces every line of the block carries.

    Examples:
        ctx = Context(("def f():", "  return 1", "x = f()"))
        block = IndentedContext(ctx.advance_line(1), 2)
        [line.get_line() for line in block.iter_lines()]  # ['return 1']
    """

    parent: LineContext
    indent_level: int

    def __post_init__(self):
        if self.indent_level < 0:
            raise ValueError(f"`indent_level` must be >= 0, got {self.indent_level}")

    @property
    def indent_chars(self) -> str:
        return " " * self.indent_level

    def unwrap(self) -> LineContext:
        return self.parent

    def log_state(self) -> Position:
        parent_state = self.parent.log_state()
        return Position(line=parent_state.line, column=parent_state.column + self.indent_level)

    def done(self) -> bool:
        if self.parent.done():
            return True
        return not self.parent.get_line().startswith(self.indent_chars)

    def get_line(self) -> str:
        """Return the current line without the block indentation.

        Raises:
            EOFError: If the parent is exhausted or the line is outside the block.
        """
        if self.done():
            position = self.log_state()
            raise EOFError(
                f"Line {position.line} is outside the block indented by {self.indent_level}"
            )
        return self.parent.get_line()[self.indent_level :]

    def advance_line(self, lines: int = 1) -> IndentedContext:
        return IndentedContext(self.parent.advance_line(lines), self.indent_level)

    def iter_lines(self) -> Iterator[IndentedContext]:
        for parent_ctx in self.parent.iter_lines():
            indented_ctx = IndentedContext(parent_ctx, self.indent_level)
            if indented_ctx.done():
                break
            yield indented_ctx
