"""Parser for the linter's compact text report.

One finding per line::

    src/app.js: line 10, col 5, Error - Missing semicolon (semi)

Fields are the file reference, 1-based line and column, a severity label,
the message and a trailing locator (the rule id for ESLint). Lines that do
not follow this grammar (blank lines, summaries, banners) are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Union

from lintbridge.core.models import Diagnostic, Report, Severity

COMPACT_LINE_PATTERN = re.compile(
    r"^(?P<file>.+):\sline\s(?P<line>\d+),\scol\s(?P<col>\d+),\s"
    r"(?P<label>\S+)\s-\s(?P<message>.+)\s(?P<locator>.+)$",
    re.ASCII,
)


@dataclass(frozen=True)
class MatchedLine:
    """A report line that produced a diagnostic."""

    diagnostic: Diagnostic
    file_ref: str
    locator: str


@dataclass(frozen=True)
class SkippedLine:
    """A report line that is not a finding."""

    text: str


ParsedLine = Union[MatchedLine, SkippedLine]


def parse_line(text: str) -> ParsedLine:
    """Parse a single report line."""
    match = COMPACT_LINE_PATTERN.match(text.rstrip("\r"))
    if match is None:
        return SkippedLine(text)

    diagnostic = Diagnostic(
        severity=Severity.from_label(match.group("label")),
        line=int(match.group("line")),
        column=int(match.group("col")),
        message=match.group("message"),
    )
    return MatchedLine(
        diagnostic=diagnostic,
        file_ref=match.group("file"),
        locator=match.group("locator"),
    )


def iter_parsed_lines(output: str) -> Iterator[ParsedLine]:
    for line in output.split("\n"):
        yield parse_line(line)


def parse_report(output: str) -> Report:
    """Turn the tool's stdout into a Report, keeping the tool's order."""
    return Report(diagnostics=[
        parsed.diagnostic
        for parsed in iter_parsed_lines(output)
        if isinstance(parsed, MatchedLine)
    ])
