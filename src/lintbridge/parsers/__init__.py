"""Parsers that turn linter output into reports."""

from lintbridge.parsers.compact import (
    MatchedLine,
    ParsedLine,
    SkippedLine,
    iter_parsed_lines,
    parse_line,
    parse_report,
)

__all__ = [
    "MatchedLine",
    "ParsedLine",
    "SkippedLine",
    "iter_parsed_lines",
    "parse_line",
    "parse_report",
]
