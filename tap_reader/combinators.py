"""Grammar-agnostic combinators composing parsers into larger parsers.

A parser is any callable taking a `LineContext` and returning a
`ParseResult`. Expected mismatches are returned as `ParseFailure` values;
combinators never raise for them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .constants import DEFAULT_ITER_LIMIT
from .context import IndentedContext, LineContext
from .models import ManyToken, SequenceToken
from .results import ParseResult, ParseSuccess, fail, is_success, success

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Parser = Callable[[LineContext], ParseResult[T]]


def sequence(*parsers: Parser[Any]) -> Parser[SequenceToken]:
    """Run parsers left to right, threading the context from one to the next.

    Returns:
        Parser: On success, a `SequenceToken` holding every sub-token and the
            context after the last parser. The first failure is returned as is,
            with no partial token.

    Examples:
        sequence(tap_version13, test_plan_range())(Context(("TAP version 13", "1..1")))
    """

    def parse(ctx: LineContext) -> ParseResult[SequenceToken]:
        tokens = []
        current_ctx = ctx

        for parser in parsers:
            result = parser(current_ctx)
            if not is_success(result):
                return result
            tokens.append(result.token)
            current_ctx = result.context

        return success(current_ctx, SequenceToken(tuple(tokens)))

    return parse


def any_of(label: str, *parsers: Parser[Any]) -> Parser[Any]:
    """Return the first success among parsers tried against the same context.

    Parsers after the first success are never called. When every parser
    fails, their messages are dropped in favor of one failure naming `label`,
    reported at the original context.
    """

    def parse(ctx: LineContext) -> ParseResult[Any]:
        for parser in parsers:
            result = parser(ctx)
            if is_success(result):
                return result
        return fail(ctx, f'Failed to match any parser in sequence "{label}"')

    return parse


def zero_or_many_of(
    tag: str, parser: Parser[Any], iter_limit: int = DEFAULT_ITER_LIMIT
) -> Parser[ManyToken]:
    """Apply a parser repeatedly, collecting tokens until it stops matching.

    Repetition stops when the context is exhausted, after `iter_limit`
    attempts, or on the first failure. The result is always a success, with
    zero or more tokens. When stopping on a failure the returned context is the
    one carried by that failure.

    Args:
        tag: `type` of the produced `ManyToken`.
        parser: Parser to repeat.
        iter_limit: Maximum number of attempts.

    Returns:
        Parser: A parser that never fails.
    """

    def parse(ctx: LineContext) -> ParseResult[ManyToken]:
        tokens = []
        current_ctx = ctx
        iterations = 0

        while not current_ctx.done() and iterations < iter_limit:
            iterations += 1
            result = parser(current_ctx)
            if not is_success(result):
                logger.debug("%s stopped after %d tokens: %s", tag, len(tokens), result.message)
                return success(result.context, ManyToken(tag, tuple(tokens)))
            tokens.append(result.token)
            current_ctx = result.context

        if iterations >= iter_limit and not current_ctx.done():
            logger.debug("%s reached the iteration limit of %d", tag, iter_limit)
        return success(current_ctx, ManyToken(tag, tuple(tokens)))

    return parse


def map_success(
    parser: Parser[T], map_function: Callable[[ParseSuccess[T]], ParseResult[U]]
) -> Parser[U]:
    """Transform or re-validate the successful results of a parser.

    `map_function` receives the whole success and may return a failure.
    Failures from `parser` are returned without calling it.
    """

    def parse(ctx: LineContext) -> ParseResult[U]:
        result = parser(ctx)
        if not is_success(result):
            return result
        return map_function(result)

    return parse


def indented_block(parser: Parser[T], indent_level: int) -> Parser[T]:
    """Run a parser on the block indented by `indent_level` spaces.

    The wrapped parser sees the block lines with the indentation removed. On
    success the context is unwrapped back to the caller's scope, so parsing
    continues on the line following whatever the parser consumed.
    """

    def parse(ctx: LineContext) -> ParseResult[T]:
        result = parser(IndentedContext(ctx, indent_level))
        if not is_success(result):
            return result
        block_ctx = result.context
        if isinstance(block_ctx, IndentedContext):
            block_ctx = block_ctx.unwrap()
        return success(block_ctx, result.token)

    return parse
