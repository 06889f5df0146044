"""End-to-end tests against a stand-in linter script.

The script lives where a project's ESLint would (node_modules/.bin/eslint)
and is executed by the Python interpreter acting as the runtime. It echoes
the working directory and module-search path it was started with, so the
tests can check the context each invocation ran under.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

from lintbridge.config.models import LintBridgeConfig
from lintbridge.core.context import ContextBinder
from lintbridge.core.models import LintStatus, Severity
from lintbridge.orchestrator import LintOrchestrator

FAKE_LINTER = '''\
import os
import time
import sys

delay_file = os.path.join(os.getcwd(), ".lint-delay")
if os.path.exists(delay_file):
    with open(delay_file, encoding="utf-8") as f:
        time.sleep(float(f.read()))

args = sys.argv[1:]
target = args[-1]
if "--fix" in args:
    with open(target, "a", encoding="utf-8") as f:
        f.write(";\\n")
    sys.exit(0)

search = os.environ.get("NODE_PATH", "").split(os.pathsep)[0]
print(f"{target}: line 3, col 7, Error - cwd={os.getcwd()} (echo-cwd)")
print(f"{target}: line 1, col 1, Warning - path={search} (echo-path)")
print("")
print("2 problems")
sys.exit(1)
'''


def make_project(base: Path, name: str, delay: Optional[float] = None) -> Path:
    root = base / name
    bin_dir = root / "node_modules" / ".bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "eslint").write_text(FAKE_LINTER)
    (root / "app.js").write_text("var x = 1\n")
    if delay is not None:
        (root / ".lint-delay").write_text(str(delay))
    return root


@pytest.fixture
def orchestrator(tmp_path: Path) -> LintOrchestrator:
    return LintOrchestrator(
        LintBridgeConfig(),
        binder=ContextBinder(environ={}, default_cwd=str(tmp_path)),
    )


@pytest.mark.asyncio
async def test_lint_runs_in_project_context(orchestrator: LintOrchestrator, tmp_path: Path) -> None:
    root = make_project(tmp_path, "alpha")

    outcome = await orchestrator.lint(str(root) + "/", str(root / "app.js"), sys.executable)

    assert outcome.status is LintStatus.OK
    first, second = outcome.report.diagnostics
    assert first.severity is Severity.ERROR
    assert Path(first.message.split("=", 1)[1]).resolve() == root.resolve()
    assert first.pos == {"line": 2, "ch": 6}
    assert second.severity is Severity.WARNING
    assert second.message == f"path={root / 'node_modules'}"


@pytest.mark.asyncio
async def test_switching_projects_switches_context(orchestrator: LintOrchestrator, tmp_path: Path) -> None:
    alpha = make_project(tmp_path, "alpha")
    beta = make_project(tmp_path, "beta")

    await orchestrator.lint(str(alpha), str(alpha / "app.js"), sys.executable)
    outcome = await orchestrator.lint(str(beta), str(beta / "app.js"), sys.executable)

    messages = [d.message for d in outcome.report]
    assert messages[1] == f"path={beta / 'node_modules'}"
    assert Path(messages[0].split("=", 1)[1]).resolve() == beta.resolve()


@pytest.mark.asyncio
async def test_overlapping_calls_keep_their_own_context(
    orchestrator: LintOrchestrator, tmp_path: Path
) -> None:
    alpha = make_project(tmp_path, "alpha", delay=0.3)
    beta = make_project(tmp_path, "beta")

    # alpha is still running when beta rebinds the orchestrator
    alpha_outcome, beta_outcome = await asyncio.gather(
        orchestrator.lint(str(alpha), str(alpha / "app.js"), sys.executable),
        orchestrator.lint(str(beta), str(beta / "app.js"), sys.executable),
    )

    for root, outcome in ((alpha, alpha_outcome), (beta, beta_outcome)):
        assert outcome.status is LintStatus.OK
        cwd_message, path_message = [d.message for d in outcome.report]
        assert Path(cwd_message.split("=", 1)[1]).resolve() == root.resolve()
        assert path_message == f"path={root / 'node_modules'}"

    assert orchestrator.bound_root == str(beta)


@pytest.mark.asyncio
async def test_fix_runs_fake_linter(orchestrator: LintOrchestrator, tmp_path: Path) -> None:
    root = make_project(tmp_path, "alpha")

    outcome = await orchestrator.fix(str(root), str(root / "app.js"), sys.executable)

    assert outcome.ok
    assert outcome.returncode == 0
    assert (root / "app.js").read_text() == "var x = 1\n;\n"


@pytest.mark.asyncio
async def test_missing_runtime_is_tool_failure(orchestrator: LintOrchestrator, tmp_path: Path) -> None:
    root = make_project(tmp_path, "alpha")

    outcome = await orchestrator.lint(str(root), str(root / "app.js"), str(tmp_path / "no-node"))

    assert outcome.status is LintStatus.TOOL_FAILED
    assert len(outcome.report) == 0
