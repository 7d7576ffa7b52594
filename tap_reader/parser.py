"""TAP report parsing."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import BinaryIO

from .combinators import Parser, any_of, sequence, zero_or_many_of
from .config import ConfigError, TapConfig, validate_config
from .constants import TAP_VERSION
from .context import Context
from .exceptions import TapParseError, TapReaderError
from .grammar import diagnostic, tap_plan_range, tap_test, tap_version
from .models import Plan, SequenceToken, TapDocument
from .results import ParseFailure, is_success
from .streams import collect_file_stat, enforce_file_size, get_max_file_size, safe_open

logger = logging.getLogger(__name__)


def build_grammar(config: TapConfig | None = None) -> Parser[SequenceToken]:
    """Build the TAP grammar: the version line, then any number of TAP lines.

    Args:
        config: Indentation and limits used by the grammar. Defaults to a new
            `TapConfig` when omitted.

    Returns:
        Parser: A parser yielding a `SequenceToken` of the version token and a
            ``lines`` `ManyToken`.
    """
    config = config or TapConfig()
    tap_lines = zero_or_many_of(
        "lines",
        any_of(
            "TAP Lines",
            tap_plan_range(),
            diagnostic(),
            tap_test(config.indent_level, config.yaml_line_limit),
        ),
        iter_limit=config.iter_limit,
    )
    return sequence(tap_version(TAP_VERSION), tap_lines)


def parse_tap(
    tap_lines: Sequence[str] | BinaryIO | Iterable[bytes], config: TapConfig | None = None
) -> TapDocument | ParseFailure:
    """Parse a TAP report into a `TapDocument`.

    Args:
        tap_lines: Either a list or tuple of lines, or a binary stream (any
            iterable of bytes chunks) that is fully buffered before parsing.
        config: Configuration controlling parsing behavior. Defaults to a new
            `TapConfig` when omitted.

    Returns:
        TapDocument | ParseFailure: The folded document, or the grammar's
            failure unchanged when the report cannot be parsed.

    Raises:
        ConfigError: If the configuration fails validation.
        StreamContractError: If a stream yields something other than bytes.

    Examples:
        parse_tap(["TAP version 13", "1..4"])
        # TapDocument(version=13, test_plan=Plan(start=1, through=4), diagnostics=(), tests=())
    """
    config = config or TapConfig()
    validate_config(config)

    if isinstance(tap_lines, (list, tuple)):
        context = Context.from_lines(tap_lines)
    else:
        context = Context.from_stream(tap_lines)

    result = build_grammar(config)(context)
    if not is_success(result):
        logger.debug("TAP parsing failed: %s", result.format_error())
        return result

    if not result.context.done():
        logger.debug(
            "Stopped parsing at line %d of %d", result.context.log_state().line, len(context.source)
        )

    _version_token, lines_token = result.token.tokens

    test_plan: Plan | None = None
    diagnostics: list[str] = []
    tests = []

    for token in lines_token.tokens:
        if token.type == "testPlan":
            test_plan = Plan(start=token.start, through=token.through)
        elif token.type == "diagnostic":
            diagnostics.append(token.diagnostic)
        elif token.type == "tapTest":
            tests.append(token)

    return TapDocument(
        version=TAP_VERSION,
        test_plan=test_plan,
        diagnostics=tuple(diagnostics),
        tests=tuple(tests),
    )


class ParseFileError(TapReaderError):
    """Raised when parsing a TAP file fails."""


def parse_file(filepath: Path, config: TapConfig | None = None) -> TapDocument:
    """Read and parse a TAP file.

    Args:
        filepath: Path to the TAP report.
        config: Configuration controlling parsing behavior; defaults to a new
            `TapConfig` when omitted.

    Returns:
        TapDocument: The parsed report.

    Raises:
        ParseFileError: If configuration is invalid, or the file is too large or
            cannot be read or decoded.
        TapParseError: If the report does not match the TAP grammar.

    Examples:
        document = parse_file(Path("report.tap"))
    """
    config = config or TapConfig()
    try:
        validate_config(config)
        max_file_size = get_max_file_size(default=config.max_file_size)
    except (ConfigError, ValueError) as error:
        raise ParseFileError(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
        with safe_open(filepath) as stream:
            result = parse_tap(stream, config)
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    if isinstance(result, ParseFailure):
        raise TapParseError(result)

    return result
