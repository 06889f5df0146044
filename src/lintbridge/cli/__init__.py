"""Command line host for lintbridge."""

from __future__ import annotations

from typing import Iterable, Optional

from lintbridge.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint, returning an exit code."""
    return CLIRunner().run(argv)


__all__ = ["CLIRunner", "main"]
