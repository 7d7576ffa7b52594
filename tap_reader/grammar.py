"""Line parsers for the TAP version 13 grammar."""

from __future__ import annotations

import re
from itertools import islice

from .combinators import Parser, indented_block, map_success, sequence
from .constants import (
    DEFAULT_INDENT_LEVEL,
    DEFAULT_YAML_LINE_LIMIT,
    DIAGNOSTIC_PATTERN,
    TAP_VERSION,
    TAP_VERSION_PATTERN,
    TEST_PLAN_PATTERN,
    TEST_TITLE_PATTERN,
    VALID_DIRECTIVES,
    YAML_END_SEPARATOR,
    YAML_START_SEPARATOR,
)
from .context import LineContext
from .models import (
    DiagnosticToken,
    PlanToken,
    RegexpToken,
    TapTestToken,
    TitleToken,
    VersionToken,
    YamlDocToken,
)
from .results import ParseResult, fail, success


def regexp_line(pattern: re.Pattern[str], error_message: str) -> Parser[RegexpToken]:
    """Match the whole current line against `pattern`.

    Args:
        pattern: Compiled pattern; it must match the entire line.
        error_message: Failure message used when the line does not match.

    Returns:
        Parser: On a match, advances one line and yields the captured groups.
            On a mismatch, or when no line is left, fails at the unchanged
            context.

    Examples:
        regexp_line(re.compile(r"(\\d+)\\.\\.(\\d+)"), "Not a test plan")
    """

    def parse(ctx: LineContext) -> ParseResult[RegexpToken]:
        if ctx.done():
            return fail(ctx, error_message)

        match = pattern.fullmatch(ctx.get_line())
        if not match:
            return fail(ctx, error_message)

        return success(ctx.advance_line(1), RegexpToken(match.groups()))

    return parse


def tap_version(expected_version: int) -> Parser[VersionToken]:
    """Parse the ``TAP version <n>`` header, accepting only `expected_version`."""
    regexp_parser = regexp_line(TAP_VERSION_PATTERN, "Not a TAP version")

    def check_version(result) -> ParseResult[VersionToken]:
        (version_str,) = result.token.matches
        version = int(version_str)

        if version != expected_version:
            return fail(
                result.context,
                f"Unexpected TAP version: Expected {expected_version}, received {version}",
            )

        return success(result.context, VersionToken(version))

    return map_success(regexp_parser, check_version)


tap_version13 = tap_version(TAP_VERSION)


def tap_plan_range() -> Parser[PlanToken]:
    def to_plan(result) -> ParseResult[PlanToken]:
        start_str, through_str = result.token.matches
        return success(result.context, PlanToken(int(start_str), int(through_str)))

    return map_success(regexp_line(TEST_PLAN_PATTERN, "Not a test plan"), to_plan)


def diagnostic() -> Parser[DiagnosticToken]:
    def to_diagnostic(result) -> ParseResult[DiagnosticToken]:
        (diagnostic_str,) = result.token.matches
        return success(result.context, DiagnosticToken(diagnostic_str))

    return map_success(regexp_line(DIAGNOSTIC_PATTERN, "Not a diagnostic line"), to_diagnostic)


def tap_test_title() -> Parser[TitleToken]:
    """Parse an ``ok``/``not ok`` test result line.

    A directive is only recognized after ``# ``. It is matched without regard
    to case and stored lowercased, so ``# SKIP`` yields ``skip``. Any word
    other than ``todo`` or ``skip`` in that position fails the line.

    Examples:
        tap_test_title()(Context(("ok 42 the description # todo",))).token
        # TitleToken(ok=True, test_number=42, description='the description', directive='todo')
    """
    regexp_parser = regexp_line(TEST_TITLE_PATTERN, "Not a tap test result line")

    def to_title(result) -> ParseResult[TitleToken]:
        status, test_number_str, description, raw_directive = result.token.matches
        directive = raw_directive.lower() if raw_directive else None

        if directive is not None and directive not in VALID_DIRECTIVES:
            return fail(
                result.context,
                f'Unexpected test diagnostic value "{raw_directive}", only "todo" and "skip" are valid',
            )

        test_number = int(test_number_str) if test_number_str else None
        trimmed_description = description.rstrip() if description else None

        return success(
            result.context,
            TitleToken(
                ok=status == "ok",
                test_number=test_number,
                description=trimmed_description or None,
                directive=directive,
            ),
        )

    return map_success(regexp_parser, to_title)


def nested_yaml_doc(yaml_line_limit: int = DEFAULT_YAML_LINE_LIMIT) -> Parser[YamlDocToken]:
    """Collect the raw lines of a ``---`` ... ``...`` block.

    Meant to run on an indent-scoped context: lines are returned as that
    context presents them, so deeper indentation inside the block is kept.

    Args:
        yaml_line_limit: Maximum number of lines between the ``---`` and
            ``...`` delimiters.

    Returns:
        Parser: On success, the block lines and the context just after the
            closing delimiter. Fails when the block is not opened on the current
            line, or when it ends or the limit is reached before ``...``.
    """

    def parse(ctx: LineContext) -> ParseResult[YamlDocToken]:
        start_separator = ctx.get_line() if not ctx.done() else None

        if start_separator != YAML_START_SEPARATOR:
            return fail(
                ctx,
                f'Expected a TAP YAML document separator ("{YAML_START_SEPARATOR}") '
                f"but received {start_separator}",
            )

        yaml_doc_lines = []

        # one extra line leaves room for the closing delimiter
        for line_ctx in islice(ctx.advance_line(1).iter_lines(), yaml_line_limit + 1):
            line = line_ctx.get_line()

            if line == YAML_END_SEPARATOR:
                return success(line_ctx.advance_line(1), YamlDocToken(tuple(yaml_doc_lines)))

            yaml_doc_lines.append(line)

        return fail(
            ctx,
            "Didn't encounter a YAML line delimiter before configured limit of "
            f"{yaml_line_limit} lines.",
        )

    return parse


def tap_test(
    indent_level: int = DEFAULT_INDENT_LEVEL, yaml_line_limit: int = DEFAULT_YAML_LINE_LIMIT
) -> Parser[TapTestToken]:
    """Parse a test result line followed by its indented YAML block."""
    test_sequence = sequence(
        tap_test_title(),
        indented_block(nested_yaml_doc(yaml_line_limit), indent_level),
    )

    def to_test(result) -> ParseResult[TapTestToken]:
        title, yaml_doc_contents = result.token.tokens
        return success(result.context, TapTestToken(title, yaml_doc_contents))

    return map_success(test_sequence, to_test)
