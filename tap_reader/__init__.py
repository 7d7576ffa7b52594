"""
tap-reader: Parser for TAP version 13 test reports.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    node --test --test-reporter=tap | tap-reader
    tap-reader report.tap --format summary

Library Usage:
    from tap_reader import parse_tap, is_success

    document = parse_tap(["TAP version 13", "1..1", "ok 1 - works", "  ---", "  ..."])
    for test in document.tests:
        print(test.title.ok, test.title.description)

The parsing engine (cursors, results and combinators) is usable for other
line-oriented grammars as well.
"""

from .combinators import any_of, indented_block, map_success, sequence, zero_or_many_of
from .config import ConfigError, TapConfig
from .context import Context, IndentedContext, Position
from .exceptions import StreamContractError, TapParseError, TapReaderError
from .models import Plan, TapDocument, TapTestToken, TitleToken, YamlDocToken
from .parser import ParseFileError, build_grammar, parse_file, parse_tap
from .results import ParseFailure, ParseSuccess, fail, is_success, success

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_tap",
    "parse_file",
    "build_grammar",
    # Parsing engine
    "Context",
    "IndentedContext",
    "Position",
    "ParseSuccess",
    "ParseFailure",
    "success",
    "fail",
    "is_success",
    "sequence",
    "any_of",
    "zero_or_many_of",
    "map_success",
    "indented_block",
    # Data models
    "Plan",
    "TapDocument",
    "TapTestToken",
    "TitleToken",
    "YamlDocToken",
    # Configuration
    "TapConfig",
    # Exceptions
    "ConfigError",
    "ParseFileError",
    "StreamContractError",
    "TapParseError",
    "TapReaderError",
    # Version
    "__version__",
]
