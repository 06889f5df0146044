"""CLI runner orchestration.

This module handles command dispatch and execution for the lintbridge CLI.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from lintbridge.cli.arguments import build_parser
from lintbridge.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_SUCCESS,
    EXIT_TOOL_ERROR,
)
from lintbridge.config import LintBridgeConfig, load_config
from lintbridge.config.loader import ConfigError
from lintbridge.core.errors import ProjectContextError
from lintbridge.core.logging import configure_logging, get_logger
from lintbridge.core.models import LintOutcome
from lintbridge.orchestrator import LintOrchestrator

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get lintbridge version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("lintbridge")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from lintbridge import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        self.parser = build_parser()
        self._version = get_version()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None

        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for usage errors
            return EXIT_SUCCESS if e.code == 0 else EXIT_INVALID_USAGE

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)
        if command is None:
            self.parser.print_help()
            return EXIT_INVALID_USAGE

        project_root = Path(args.root or ".").resolve()
        try:
            config = self._load_config(args, project_root)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        orchestrator = LintOrchestrator(config)

        if command == "lint":
            return self._handle_lint(args, orchestrator, project_root)
        if command == "fix":
            return self._handle_fix(args, orchestrator, project_root)
        return self._handle_status(orchestrator, project_root)

    def _load_config(self, args: argparse.Namespace, project_root: Path) -> LintBridgeConfig:
        overrides: Dict[str, Any] = {}
        if args.runtime is not None:
            overrides["runtime"] = {"path": args.runtime}
        config_path = Path(args.config) if args.config else None
        return load_config(project_root, config_path, overrides)

    def _handle_lint(
        self,
        args: argparse.Namespace,
        orchestrator: LintOrchestrator,
        project_root: Path,
    ) -> int:
        file_path = str(Path(args.file).resolve())
        outcome = asyncio.run(orchestrator.lint(str(project_root), file_path))

        if not outcome.ok:
            LOGGER.error(f"Lint failed ({outcome.status.value}): {outcome.error}")
            return EXIT_TOOL_ERROR

        if args.format == "text":
            self._print_text(outcome, file_path)
        else:
            print(json.dumps(outcome.report.to_dict(), indent=2))

        return EXIT_ISSUES_FOUND if len(outcome.report) else EXIT_SUCCESS

    def _handle_fix(
        self,
        args: argparse.Namespace,
        orchestrator: LintOrchestrator,
        project_root: Path,
    ) -> int:
        file_path = str(Path(args.file).resolve())
        outcome = asyncio.run(orchestrator.fix(str(project_root), file_path))

        if not outcome.ok:
            LOGGER.error(f"Fix failed ({outcome.status.value}): {outcome.error}")
            return EXIT_TOOL_ERROR

        LOGGER.info(f"{orchestrator.linter.name} --fix exited with status {outcome.returncode}")
        return EXIT_SUCCESS

    def _handle_status(self, orchestrator: LintOrchestrator, project_root: Path) -> int:
        try:
            context = orchestrator.context_for(str(project_root))
        except ProjectContextError as e:
            LOGGER.error(str(e))
            return EXIT_TOOL_ERROR

        linter_version = asyncio.run(orchestrator.get_version(str(project_root)))

        print(f"lintbridge version: {self._version}")
        print(f"Project root:       {context.root}")
        print(f"Linter:             {context.linter_path} ({linter_version})")
        print(f"Runtime:            {orchestrator.config.runtime.path or '<none>'}")
        print(f"Working directory:  {context.working_directory}")
        print(f"{context.module_search_var}:")
        for entry in context.module_search_path:
            print(f"  {entry}")
        sources = orchestrator.config.sources
        print(f"Config sources:     {', '.join(sources) if sources else 'defaults'}")
        return EXIT_SUCCESS

    @staticmethod
    def _print_text(outcome: LintOutcome, file_path: str) -> None:
        for diagnostic in outcome.report:
            print(f"{file_path}:{diagnostic.line}:{diagnostic.column}: {diagnostic.display_message}")
