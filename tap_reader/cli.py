"""
Parses a TAP version 13 report and prints it as JSON or as a short summary.
Reads from a file, or from standard input when no file (or `-`) is given.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import StreamContractError, TapParseError
from .models import TapDocument
from .parser import ParseFileError, parse_file, parse_tap
from .results import ParseFailure

__all__ = ["cli"]

STDIN_PATH = "-"


def format_summary(document: TapDocument) -> str:
    """Render a short human-readable summary of a parsed report.

    Examples:
        format_summary(parse_tap(["TAP version 13", "1..0"]))
    """
    lines = [f"TAP version {document.version}"]
    if document.test_plan is not None:
        lines.append(f"plan: {document.test_plan.start}..{document.test_plan.through}")
    lines.append(
        f"tests: {len(document.tests)} ({document.passed} passed, {document.failed} failed)"
    )
    for test in document.tests:
        if test.title.ok:
            continue
        number = f" {test.title.test_number}" if test.title.test_number is not None else ""
        description = f" {test.title.description}" if test.title.description else ""
        lines.append(f"  not ok{number}{description}")
    lines.append(f"diagnostics: {len(document.diagnostics)}")
    return "\n".join(lines)


@click.command()
@click.version_option(package_name="tap-reader")
@click.option("--indent-level", type=int, help="Indentation of YAML blocks under a test")
@click.option("--iter-limit", type=int, help="Maximum number of lines parsed after the header")
@click.option("--yaml-line-limit", type=int, help="Maximum number of lines between a YAML block's delimiters")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "summary"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option("--verbose", is_flag=True, help="Log parser progress to stderr")
@click.argument(
    "filepath",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
    default=STDIN_PATH,
)
def cli(
    filepath: str,
    indent_level: int | None = None,
    iter_limit: int | None = None,
    yaml_line_limit: int | None = None,
    output_format: str = "json",
    verbose: bool = False,
):
    """
    Entry point for parsing a TAP report.

    Args:
        filepath: Path to the TAP report, or `-` for standard input.
        indent_level: Override for the YAML block indentation.
        iter_limit: Override for the maximum number of parsed lines.
        yaml_line_limit: Override for the maximum YAML block length.
        output_format: `json` for the full document, `summary` for counts.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If overrides or configuration files hold invalid values.
        click.ClickException: If the report cannot be read or does not parse.

    Examples:
        node --test --test-reporter=tap | tap-reader --format summary
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    from_stdin = filepath == STDIN_PATH
    search_path = Path.cwd() if from_stdin else Path(filepath).resolve().parent
    try:
        config = build_config(
            search_path,
            indent_level=indent_level,
            iter_limit=iter_limit,
            yaml_line_limit=yaml_line_limit,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    source_name = "<stdin>" if from_stdin else filepath
    try:
        if from_stdin:
            result = parse_tap(click.get_binary_stream("stdin"), config)
            if isinstance(result, ParseFailure):
                raise TapParseError(result)
            document = result
        else:
            document = parse_file(Path(filepath), config)
    except TapParseError as error:
        raise click.ClickException(f"{source_name}:{error}") from error
    except (ParseFileError, StreamContractError) as error:
        raise click.ClickException(str(error)) from error
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {source_name}: {error}") from error

    if output_format == "summary":
        click.echo(format_summary(document))
    else:
        click.echo(json.dumps(document.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
