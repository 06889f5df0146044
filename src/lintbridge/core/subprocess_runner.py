"""Asynchronous subprocess runner for the external analyzer.

The caller's event loop stays free while the tool runs. Each call spawns
exactly one process; there are no retries.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Union

from lintbridge.core.errors import ProcessSpawnError, ProcessTimeoutError
from lintbridge.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ProcessResult:
    """Captured result of a finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


async def run_tool(
    cmd: List[str],
    cwd: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    capture_output: bool = True,
) -> ProcessResult:
    """Run a command and capture its output.

    A non-zero exit status is returned as-is: linters exit non-zero when
    they find problems, and the findings are carried on stdout.

    Args:
        cmd: Command and arguments to run.
        cwd: Working directory for the command.
        env: Full environment for the child process (defaults to ours).
        timeout: Seconds to wait before killing the process. None waits forever.
        capture_output: Whether to capture stdout/stderr. When False the
            output is discarded.

    Returns:
        ProcessResult with the exit status and decoded output.

    Raises:
        ProcessSpawnError: If the process could not be started.
        ProcessTimeoutError: If the process did not finish within ``timeout``.
    """
    stream = asyncio.subprocess.PIPE if capture_output else asyncio.subprocess.DEVNULL

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stream,
            stderr=stream,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
        )
    except OSError as e:
        raise ProcessSpawnError(f"Failed to start {cmd[0]}: {e}", cmd) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            # exited between the timeout and the kill
            pass
        await proc.wait()
        raise ProcessTimeoutError(cmd, timeout or 0)
    except asyncio.CancelledError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise

    LOGGER.debug(f"{cmd[0]} exited with status {proc.returncode}")

    return ProcessResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )


async def run_fix_tool(
    cmd: List[str],
    cwd: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> int:
    """Run a command for its side effects only and return its exit status."""
    result = await run_tool(cmd, cwd=cwd, env=env, timeout=timeout, capture_output=False)
    return result.returncode


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
