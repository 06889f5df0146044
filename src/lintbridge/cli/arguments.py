"""Argument parser construction for lintbridge CLI.

Subcommands:
- lintbridge lint   - Lint one file and print its report
- lintbridge fix    - Apply the linter's automatic fixes to one file
- lintbridge status - Show the linter and module path resolved for a project
"""

from __future__ import annotations

import argparse


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show lintbridge version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_project_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        help="Project root directory (default: current directory).",
    )
    parser.add_argument(
        "--runtime",
        help="Runtime used to execute the linter (default: from config, 'node').",
    )
    parser.add_argument(
        "--config",
        help="Path to a lintbridge config file (overrides .lintbridge.yml).",
    )


def _build_lint_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'lint' subcommand parser."""
    lint_parser = subparsers.add_parser(
        "lint",
        help="Lint a file and print the diagnostics.",
        description="Run the project's linter on one file and report its findings.",
    )
    lint_parser.add_argument("file", help="File to lint.")
    _add_project_options(lint_parser)
    lint_parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json).",
    )


def _build_fix_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'fix' subcommand parser."""
    fix_parser = subparsers.add_parser(
        "fix",
        help="Apply automatic fixes to a file.",
        description="Run the project's linter in fix mode on one file.",
    )
    fix_parser.add_argument("file", help="File to fix.")
    _add_project_options(fix_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show how lintbridge resolves a project.",
        description="Print the linter executable, version and module path used for a project.",
    )
    _add_project_options(status_parser)


def build_parser() -> argparse.ArgumentParser:
    """Build the complete argument parser."""
    parser = argparse.ArgumentParser(
        prog="lintbridge",
        description="lintbridge - run a project's linter and report structured diagnostics.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", title="commands")
    _build_lint_parser(subparsers)
    _build_fix_parser(subparsers)
    _build_status_parser(subparsers)

    return parser
