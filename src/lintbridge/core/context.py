"""Project context resolution.

A ProjectContext says which linter executable to use for a project, which
module-search path the linter needs so the project's plugins load, and
which directory it runs in. Contexts are immutable values handed to each
subprocess call. Nothing here touches ``os.environ`` or the working
directory of the current process.
"""

from __future__ import annotations

import os
import shutil
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from lintbridge.config.models import LinterConfig
from lintbridge.core.errors import ProjectContextError
from lintbridge.core.logging import get_logger

LOGGER = get_logger(__name__)


def normalize_root(root: str, platform: str = sys.platform) -> str:
    """Strip a single trailing separator and apply the platform separator."""
    if len(root) > 1 and root[-1] in ("/", "\\"):
        root = root[:-1]
    if platform == "win32":
        root = root.replace("/", "\\")
    return root


def module_dir_for(root: str, linter: LinterConfig, platform: str = sys.platform) -> str:
    """Absolute module directory (e.g. ``<root>/node_modules``) of a project."""
    return os.path.abspath(os.path.join(normalize_root(root, platform), linter.modules_dir))


def split_search_path(value: Optional[str], sep: str = os.pathsep) -> List[str]:
    if not value:
        return []
    return [entry for entry in value.split(sep) if entry]


def join_search_path(entries: Iterable[str], sep: str = os.pathsep) -> str:
    return sep.join(entries)


def rebind_search_path(
    entries: Iterable[str],
    previous_dir: Optional[str],
    new_dir: Optional[str],
) -> List[str]:
    """Swap one project's module directory for another's.

    Every occurrence of ``previous_dir`` is removed, ``new_dir`` is put in
    front, and duplicates are dropped keeping the first occurrence.
    """
    result = [entry for entry in entries if entry != previous_dir]
    if new_dir:
        result.insert(0, new_dir)

    seen = set()
    unique: List[str] = []
    for entry in result:
        if entry not in seen:
            seen.add(entry)
            unique.append(entry)
    return unique


def linter_candidates(root: str, linter: LinterConfig, platform: str = sys.platform) -> List[Path]:
    """Project-local linter paths to try, in order.

    npm installs ``<name>.cmd`` shims next to the plain script on Windows.
    """
    bin_dir = Path(root) / linter.bin_dir
    candidates = [bin_dir / linter.name]
    if platform == "win32":
        candidates.append(bin_dir / f"{linter.name}.cmd")
    return candidates


def resolve_linter_path(
    root: Optional[str],
    linter: LinterConfig,
    platform: str = sys.platform,
) -> str:
    """Pick the linter executable for a project.

    The first of the project's own candidates (``<root>/<bin_dir>/<name>``,
    plus ``<name>.cmd`` on Windows) that is a regular file wins. Otherwise
    the globally installed linter is used. Lookup errors are logged and
    never raised.
    """
    if root:
        for candidate in linter_candidates(root, linter, platform):
            try:
                if stat.S_ISREG(candidate.stat().st_mode):
                    return str(candidate)
                LOGGER.debug(f"{candidate} is not a regular file")
            except OSError as e:
                LOGGER.debug(f"Project linter {candidate} not usable: {e}")
        LOGGER.debug(f"No project linter under {root}, using default {linter.name}")

    return shutil.which(linter.name) or linter.name


@dataclass(frozen=True)
class ProjectContext:
    """Everything a single linter invocation needs to know about its project."""

    root: Optional[str]
    linter_path: str
    module_search_path: Tuple[str, ...]
    working_directory: str
    module_search_var: str = "NODE_PATH"

    def environ(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Child-process environment with this context's module-search path."""
        env = dict(os.environ if base is None else base)
        if self.module_search_path:
            env[self.module_search_var] = join_search_path(self.module_search_path)
        else:
            env.pop(self.module_search_var, None)
        return env


class ContextBinder:
    """Keeps track of the active project and produces contexts for it.

    The binder starts from the module-search path found in the environment
    and the working directory at construction time. Binding to a new project
    replaces the previous project's module directory with the new one.
    """

    def __init__(
        self,
        linter: Optional[LinterConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
        default_cwd: Optional[str] = None,
        platform: str = sys.platform,
    ):
        self.linter = linter or LinterConfig()
        env = os.environ if environ is None else environ
        self._search_path = split_search_path(env.get(self.linter.module_search_var))
        self._default_cwd = default_cwd or os.getcwd()
        self._platform = platform
        self._active_root: Optional[str] = None

    @property
    def active_root(self) -> Optional[str]:
        return self._active_root

    @property
    def default_cwd(self) -> str:
        return self._default_cwd

    @property
    def search_path(self) -> Tuple[str, ...]:
        return tuple(self._search_path)

    def bind(self, new_root: Optional[str], previous_root: Optional[str] = None) -> ProjectContext:
        """Make ``new_root`` the active project and return its context.

        Args:
            new_root: Project root to bind. None re-binds the active root.
            previous_root: Root bound before, whose module directory is removed.

        Returns:
            The context for the newly bound project.

        Raises:
            ProjectContextError: If the root is not an existing directory. The
                binder state is left unchanged in that case.
        """
        root = new_root or self._active_root
        if root:
            root = normalize_root(root, self._platform)
            if not os.path.isdir(root):
                raise ProjectContextError(root, "not an existing directory")

        previous_dir = (
            module_dir_for(previous_root, self.linter, self._platform) if previous_root else None
        )
        new_dir = module_dir_for(root, self.linter, self._platform) if root else None
        search_path = rebind_search_path(self._search_path, previous_dir, new_dir)

        linter_path = resolve_linter_path(root, self.linter, self._platform)
        LOGGER.debug(f"Bound project {root or '<none>'} using linter {linter_path}")

        self._search_path = search_path
        self._active_root = root

        return ProjectContext(
            root=root,
            linter_path=linter_path,
            module_search_path=tuple(search_path),
            working_directory=root or self._default_cwd,
            module_search_var=self.linter.module_search_var,
        )
