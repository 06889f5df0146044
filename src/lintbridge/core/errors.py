"""Exception hierarchy for lintbridge.

These errors never reach the editor host directly: the orchestrator turns
them into outcome values (see ``lintbridge.core.models.LintStatus``).
"""

from __future__ import annotations

from typing import List, Optional


class LintBridgeError(Exception):
    """Base class for all lintbridge errors."""


class ProjectContextError(LintBridgeError):
    """A project root could not be bound for linting."""

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot bind project root {root!r}: {reason}")


class ToolExecutionError(LintBridgeError):
    """The external analyzer could not be run to completion."""

    def __init__(self, message: str, cmd: Optional[List[str]] = None):
        self.cmd = list(cmd) if cmd else []
        super().__init__(message)


class ProcessSpawnError(ToolExecutionError):
    """The external analyzer process could not be started."""


class ProcessTimeoutError(ToolExecutionError):
    """The external analyzer did not finish within the configured timeout."""

    def __init__(self, cmd: List[str], timeout: float):
        self.timeout = timeout
        super().__init__(f"{cmd[0] if cmd else 'process'} timed out after {timeout} seconds", cmd)
