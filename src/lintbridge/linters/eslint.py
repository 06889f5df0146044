"""ESLint command lines.

ESLint is a pluggable linting utility for JavaScript and TypeScript.
https://eslint.org/

The linter script is executed through a runtime (``node``) so the
project's own ESLint build is used even when it is not on PATH.
"""

from __future__ import annotations

from typing import List, Optional

from lintbridge.config.models import LinterConfig
from lintbridge.core.context import ProjectContext


class ESLintLinter:
    """Builds lint, fix and version commands for a project context."""

    def __init__(self, config: Optional[LinterConfig] = None):
        self.config = config or LinterConfig()

    @property
    def name(self) -> str:
        return self.config.name

    def lint_command(
        self,
        context: ProjectContext,
        file_path: str,
        runtime_path: Optional[str] = None,
    ) -> List[str]:
        """``<runtime> <linter> --no-color --format compact <file>``"""
        return self._base(context, runtime_path) + list(self.config.lint_args) + [file_path]

    def fix_command(
        self,
        context: ProjectContext,
        file_path: str,
        runtime_path: Optional[str] = None,
    ) -> List[str]:
        """``<runtime> <linter> --fix <file>``"""
        return self._base(context, runtime_path) + list(self.config.fix_args) + [file_path]

    def version_command(
        self,
        context: ProjectContext,
        runtime_path: Optional[str] = None,
    ) -> List[str]:
        return self._base(context, runtime_path) + ["--version"]

    @staticmethod
    def parse_version(output: str) -> str:
        """Parse ``v8.56.0`` style output, returning 'unknown' when empty."""
        version = output.strip().lstrip("v")
        return version or "unknown"

    def _base(self, context: ProjectContext, runtime_path: Optional[str]) -> List[str]:
        # An empty runtime runs the linter executable directly.
        if runtime_path:
            return [runtime_path, context.linter_path]
        return [context.linter_path]
