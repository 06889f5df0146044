"""Lint and fix entry points consumed by the editor host.

The orchestrator decides when a project has to be (re)bound, runs the
linter in that project's context and turns its output into a report.
Every call captures its own ProjectContext before the process starts, so
overlapping calls for different projects cannot see each other's state.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Optional

from lintbridge.config.models import LintBridgeConfig
from lintbridge.core.context import ContextBinder, ProjectContext, normalize_root
from lintbridge.core.errors import ProjectContextError, ToolExecutionError
from lintbridge.core.logging import get_logger
from lintbridge.core.models import FixOutcome, LintOutcome, LintStatus, Severity
from lintbridge.core.subprocess_runner import run_fix_tool, run_tool
from lintbridge.linters.eslint import ESLintLinter
from lintbridge.parsers.compact import parse_report

LOGGER = get_logger(__name__)

LintCallback = Callable[[Optional[BaseException], Optional[dict]], Any]
FixCallback = Callable[[Optional[BaseException]], Any]


class BindState(str, Enum):
    """Whether the bound project can be reused for the next call."""

    CLEAN = "clean"
    DIRTY = "dirty"


def needs_bind(state: BindState, bound_root: Optional[str], requested_root: str) -> bool:
    """A bind is needed after a failure or when the project changes."""
    return state is BindState.DIRTY or requested_root != bound_root


def next_state(
    state: BindState,
    bound_root: Optional[str],
    requested_root: str,
    bind_ok: Optional[bool],
) -> BindState:
    """State after a call for ``requested_root``.

    ``bind_ok`` is None when no bind was attempted. A failed bind stays
    DIRTY so the next call retries it.
    """
    if not needs_bind(state, bound_root, requested_root):
        return state
    return BindState.CLEAN if bind_ok else BindState.DIRTY


class LintOrchestrator:
    """Runs the linter for files of whichever project the host asks about."""

    def __init__(
        self,
        config: Optional[LintBridgeConfig] = None,
        binder: Optional[ContextBinder] = None,
    ):
        self.config = config or LintBridgeConfig()
        self.linter = ESLintLinter(self.config.linter)
        self._binder = binder or ContextBinder(self.config.linter)
        self._state = BindState.DIRTY
        self._bound_root: Optional[str] = None
        self._context: Optional[ProjectContext] = None

    @property
    def state(self) -> BindState:
        return self._state

    @property
    def bound_root(self) -> Optional[str]:
        return self._bound_root

    def context_for(self, root: str) -> ProjectContext:
        """Return the context for ``root``, binding it first when required.

        Raises:
            ProjectContextError: If binding failed. The orchestrator stays
                DIRTY and retries on the next call.
        """
        requested = normalize_root(root)
        if self._context is not None and not needs_bind(self._state, self._bound_root, requested):
            self._state = next_state(self._state, self._bound_root, requested, None)
            return self._context

        try:
            context = self._binder.bind(requested, self._bound_root)
        except ProjectContextError as e:
            LOGGER.error(f"Error binding project root: {e}")
            self._state = next_state(BindState.DIRTY, self._bound_root, requested, False)
            raise

        self._context = context
        self._state = next_state(BindState.DIRTY, self._bound_root, requested, True)
        self._bound_root = requested
        return context

    async def lint(
        self,
        root: str,
        file_path: str,
        runtime_path: Optional[str] = None,
    ) -> LintOutcome:
        """Lint one file of the project at ``root``.

        Args:
            root: Project root directory.
            file_path: Full path of the file to lint.
            runtime_path: Runtime that executes the linter. None uses the
                configured runtime, an empty string runs the linter directly.

        Returns:
            LintOutcome. Its report is empty unless the status is OK.
        """
        try:
            context = self.context_for(root)
        except ProjectContextError as e:
            return LintOutcome(status=LintStatus.CONTEXT_UNRESOLVED, error=e)

        cmd = self.linter.lint_command(context, file_path, self._runtime(runtime_path))
        LOGGER.debug(f"Running: {' '.join(cmd)}")

        try:
            result = await run_tool(
                cmd,
                cwd=context.working_directory,
                env=context.environ(),
                timeout=self.config.linter.timeout,
            )
        except ToolExecutionError as e:
            LOGGER.error(f"Failed to run {self.linter.name}: {e}")
            return LintOutcome(status=LintStatus.TOOL_FAILED, error=e)

        report = parse_report(result.stdout)
        LOGGER.info(
            f"{self.linter.name} found {len(report)} problems in {file_path} "
            f"({report.count(Severity.ERROR)} errors, {report.count(Severity.WARNING)} warnings)"
        )
        return LintOutcome(status=LintStatus.OK, report=report)

    async def fix(
        self,
        root: str,
        file_path: str,
        runtime_path: Optional[str] = None,
    ) -> FixOutcome:
        """Run the linter's automatic fixes on one file. Output is discarded."""
        try:
            context = self.context_for(root)
        except ProjectContextError as e:
            return FixOutcome(status=LintStatus.CONTEXT_UNRESOLVED, error=e)

        cmd = self.linter.fix_command(context, file_path, self._runtime(runtime_path))
        LOGGER.debug(f"Running: {' '.join(cmd)}")

        try:
            returncode = await run_fix_tool(
                cmd,
                cwd=context.working_directory,
                env=context.environ(),
                timeout=self.config.linter.timeout,
            )
        except ToolExecutionError as e:
            LOGGER.error(f"Failed to run {self.linter.name} fix: {e}")
            return FixOutcome(status=LintStatus.TOOL_FAILED, error=e)

        return FixOutcome(status=LintStatus.OK, returncode=returncode)

    async def get_version(self, root: str, runtime_path: Optional[str] = None) -> str:
        """Version of the linter that applies to ``root``, or 'unknown'."""
        try:
            context = self.context_for(root)
            result = await run_tool(
                self.linter.version_command(context, self._runtime(runtime_path)),
                cwd=context.working_directory,
                env=context.environ(),
                timeout=30,
            )
        except (ProjectContextError, ToolExecutionError) as e:
            LOGGER.debug(f"Could not determine {self.linter.name} version: {e}")
            return "unknown"
        if result.returncode != 0:
            return "unknown"
        return self.linter.parse_version(result.stdout)

    def lint_file(
        self,
        root: str,
        file_path: str,
        runtime_path: Optional[str],
        callback: LintCallback,
    ) -> "asyncio.Task[None]":
        """Callback flavour of :meth:`lint` for hosts.

        The callback is invoked exactly once with ``(error, report_dict)``.
        Failures are delivered as an empty report unless
        ``config.surface_errors`` is set, in which case the error is passed
        and the report is None. Must be called from a running event loop.
        """

        async def _deliver() -> None:
            outcome = await self.lint(root, file_path, runtime_path)
            if outcome.error is not None and self.config.surface_errors:
                _invoke(callback, outcome.error, None)
            else:
                _invoke(callback, None, outcome.report.to_dict())

        return asyncio.get_running_loop().create_task(_deliver())

    def fix_file(
        self,
        root: str,
        file_path: str,
        runtime_path: Optional[str],
        callback: FixCallback,
    ) -> "asyncio.Task[None]":
        """Callback flavour of :meth:`fix`; the callback receives ``(error,)``."""

        async def _deliver() -> None:
            outcome = await self.fix(root, file_path, runtime_path)
            if outcome.error is not None and self.config.surface_errors:
                _invoke(callback, outcome.error)
            else:
                _invoke(callback, None)

        return asyncio.get_running_loop().create_task(_deliver())

    def _runtime(self, runtime_path: Optional[str]) -> str:
        return self.config.runtime.path if runtime_path is None else runtime_path


def _invoke(callback: Callable[..., Any], *args: Any) -> None:
    """Call a host callback; its exceptions are logged, not raised into the task."""
    try:
        callback(*args)
    except Exception:
        LOGGER.exception("Host callback raised an exception")
