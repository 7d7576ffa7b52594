"""Tokens produced by the grammar and the final TAP document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import TAP_VERSION


@dataclass(frozen=True)
class RegexpToken:
    """Groups captured by a full-line regular expression match.

    Attributes:
        matches: Captured groups in order; unmatched optional groups are None.
    """

    matches: tuple[str | None, ...]
    type: str = field(default="regexpMatch", init=False)


@dataclass(frozen=True)
class SequenceToken:
    """Ordered sub-tokens of a `sequence` parser."""

    tokens: tuple[Any, ...]
    type: str = field(default="sequence", init=False)


@dataclass(frozen=True)
class ManyToken:
    """Homogeneous sub-tokens collected by `zero_or_many_of`, tagged by the caller."""

    type: str
    tokens: tuple[Any, ...]


@dataclass(frozen=True)
class VersionToken:
    version: int
    type: str = field(default="tapVersion", init=False)


@dataclass(frozen=True)
class PlanToken:
    """A ``<start>..<through>`` test plan line."""

    start: int
    through: int
    type: str = field(default="testPlan", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "start": self.start, "through": self.through}


@dataclass(frozen=True)
class DiagnosticToken:
    """A ``# <text>`` comment line, with the text kept verbatim."""

    diagnostic: str
    type: str = field(default="diagnostic", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "diagnostic": self.diagnostic}


@dataclass(frozen=True)
class TitleToken:
    """The ``ok``/``not ok`` line of a test result.

    Attributes:
        ok: True for ``ok``, False for ``not ok``.
        test_number: Test number when present.
        description: Description with trailing whitespace removed, when present.
        directive: ``"todo"`` or ``"skip"`` when the line carries a directive.
    """

    ok: bool
    test_number: int | None = None
    description: str | None = None
    directive: str | None = None
    type: str = field(default="tapTestTitle", init=False)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "ok": self.ok}
        if self.test_number is not None:
            data["testNumber"] = self.test_number
        if self.description is not None:
            data["description"] = self.description
        if self.directive is not None:
            data["diagnostic"] = self.directive
        return data


@dataclass(frozen=True)
class YamlDocToken:
    """Raw lines of a ``---``/``...`` block, re-based to column 0."""

    yaml_doc_lines: tuple[str, ...]
    type: str = field(default="yamlDocLines", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "yamlDocLines": list(self.yaml_doc_lines)}


@dataclass(frozen=True)
class TapTestToken:
    """A test result line together with its YAML block."""

    title: TitleToken
    yaml_doc_contents: YamlDocToken
    type: str = field(default="tapTest", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title.to_dict(),
            "yamlDocContents": self.yaml_doc_contents.to_dict(),
        }


@dataclass(frozen=True)
class Plan:
    start: int
    through: int


@dataclass(frozen=True)
class TapDocument:
    """Structured result of parsing a TAP report.

    Attributes:
        version: Protocol version, always 13.
        test_plan: Declared test range, or None when the report has no plan.
        diagnostics: Comment lines in order of appearance, without the ``# `` prefix.
        tests: Test entries in order of appearance.
    """

    version: int = TAP_VERSION
    test_plan: Plan | None = None
    diagnostics: tuple[str, ...] = ()
    tests: tuple[TapTestToken, ...] = ()

    @property
    def passed(self) -> int:
        return sum(1 for test in self.tests if test.title.ok)

    @property
    def failed(self) -> int:
        return sum(1 for test in self.tests if not test.title.ok)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": self.version}
        if self.test_plan is not None:
            data["testPlan"] = {"start": self.test_plan.start, "through": self.test_plan.through}
        data["diagnostics"] = list(self.diagnostics)
        data["tests"] = [test.to_dict() for test in self.tests]
        return data
