"""Typed configuration for lintbridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_LINT_ARGS = ["--no-color", "--format", "compact"]
DEFAULT_FIX_ARGS = ["--fix"]


@dataclass
class LinterConfig:
    """How to find and call the external linter.

    ``bin_dir`` and ``modules_dir`` are relative to the project root.
    """

    name: str = "eslint"
    bin_dir: str = "node_modules/.bin"
    modules_dir: str = "node_modules"
    module_search_var: str = "NODE_PATH"
    lint_args: List[str] = field(default_factory=lambda: list(DEFAULT_LINT_ARGS))
    fix_args: List[str] = field(default_factory=lambda: list(DEFAULT_FIX_ARGS))
    timeout: Optional[float] = None


@dataclass
class RuntimeConfig:
    """Runtime used to execute the linter script (e.g. ``node``)."""

    path: str = "node"


@dataclass
class LintBridgeConfig:
    """Complete lintbridge configuration.

    ``surface_errors`` selects how failures reach callback-style hosts:
    False delivers an empty report, True delivers the error object.
    """

    linter: LinterConfig = field(default_factory=LinterConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    surface_errors: bool = False

    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        """Where this configuration was assembled from, lowest precedence first."""
        return list(self._config_sources)
