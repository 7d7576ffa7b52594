"""Success/failure values returned by every parser."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from .context import LineContext

T = TypeVar("T")


@dataclass(frozen=True)
class ParseSuccess(Generic[T]):
    """A recognized token and the context right after the consumed input.

    Attributes:
        token: Token produced by the parser.
        context: Position immediately after the consumed lines.
        success: Always True.
    """

    token: T
    context: LineContext
    success: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ParseFailure:
    """A mismatch and the context where it was detected.

    Attributes:
        message: Human readable description of the mismatch.
        context: Position at which matching could not proceed. This is not
            necessarily where the failed parser started.
        success: Always False.
    """

    message: str
    context: LineContext
    success: bool = field(default=False, init=False)

    def format_error(self) -> str:
        """Render the failure as ``line:column: message`` (zero-based).

        Examples:
            fail(Context(("x",)), "Not a TAP version").format_error()
            # '0:0: Not a TAP version'
        """
        position = self.context.log_state()
        return f"{position.line}:{position.column}: {self.message}"


ParseResult = Union[ParseSuccess[T], ParseFailure]


def success(context: LineContext, token: T) -> ParseSuccess[T]:
    return ParseSuccess(token=token, context=context)


def fail(context: LineContext, message: str) -> ParseFailure:
    return ParseFailure(message=message, context=context)


def is_success(value: Any) -> bool:
    """Check whether a value is a successful parse result.

    The check is structural: any object or mapping whose ``success`` is the
    boolean True counts, so results built elsewhere interoperate.

    Args:
        value: Anything.

    Returns:
        bool: True for successful results, False for failures and for values
            that are not results at all.

    Examples:
        is_success(success(ctx, token))  # True
        is_success({"success": 1})  # False
    """
    if isinstance(value, Mapping):
        return value.get("success") is True
    return getattr(value, "success", None) is True
