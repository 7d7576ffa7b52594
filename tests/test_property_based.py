from __future__ import annotations

import string

from hypothesis import assume, given
from hypothesis import strategies as st

from tap_reader.combinators import any_of, zero_or_many_of
from tap_reader.context import Context, IndentedContext
from tap_reader.grammar import tap_test_title
from tap_reader.parser import parse_tap
from tap_reader.results import fail, is_success, success

lines_strategy = st.lists(st.text(alphabet=string.printable.replace("\n", ""), max_size=20), max_size=12)


def _line_echo(ctx):
    line = ctx.get_line()
    if line.startswith("!"):
        return fail(ctx.advance_line(1), "bang")
    return success(ctx.advance_line(1), line)


@given(lines_strategy, st.integers(min_value=0, max_value=6), st.integers(min_value=0, max_value=6))
def test_advancing_is_additive(lines, first, second):
    ctx = Context(tuple(lines))
    assume(first + second <= len(lines))

    stepped = ctx.advance_line(first).advance_line(second)

    assert stepped.log_state() == ctx.advance_line(first + second).log_state()


@given(lines_strategy, st.integers(min_value=1, max_value=20))
def test_zero_or_many_never_fails(lines, iter_limit):
    ctx = Context(tuple(lines))

    result = zero_or_many_of("lines", _line_echo, iter_limit=iter_limit)(ctx)

    assert is_success(result)
    assert len(result.token.tokens) <= iter_limit


@given(st.lists(st.text(max_size=10), min_size=1, max_size=5), st.text(max_size=10))
def test_any_of_failure_message_ignores_sub_failures(messages, label):
    parsers = [lambda ctx, message=message: fail(ctx, message) for message in messages]
    ctx = Context(("line",))

    result = any_of(label, *parsers)(ctx)

    assert result == fail(ctx, f'Failed to match any parser in sequence "{label}"')


@given(lines_strategy, st.integers(min_value=0, max_value=4))
def test_indented_done_matches_raw_indentation(lines, indent_level):
    for offset in range(len(lines) + 1):
        parent = Context(tuple(lines)).advance_line(offset)
        indented = IndentedContext(parent, indent_level)

        expected = parent.done() or not parent.get_line().startswith(" " * indent_level)
        assert indented.done() is expected


@given(
    st.booleans(),
    st.one_of(st.none(), st.integers(min_value=0, max_value=10_000)),
    st.one_of(st.none(), st.text(alphabet=string.ascii_letters + " -_", min_size=1, max_size=30)),
    st.sampled_from([None, "todo", "skip"]),
)
def test_test_title_round_trips_fields(ok, test_number, description, directive):
    assume(description is None or description.strip())
    parts = ["ok" if ok else "not ok"]
    if test_number is not None:
        parts.append(str(test_number))
    if description is not None:
        parts.append(description.strip())
    line = " ".join(parts) + (f" # {directive}" if directive else "")
    assume(line not in ("ok", "not ok"))

    result = tap_test_title()(Context((line,)))

    assert is_success(result)
    assert result.token.ok is ok
    assert result.token.directive == directive


@given(lines_strategy)
def test_parse_tap_is_deterministic(lines):
    assert parse_tap(["TAP version 13", *lines]) == parse_tap(["TAP version 13", *lines])
