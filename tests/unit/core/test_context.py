"""Unit tests for project context resolution."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from lintbridge.config.models import LinterConfig
from lintbridge.core.context import (
    ContextBinder,
    ProjectContext,
    join_search_path,
    linter_candidates,
    module_dir_for,
    normalize_root,
    rebind_search_path,
    resolve_linter_path,
    split_search_path,
)
from lintbridge.core.errors import ProjectContextError


def make_project(base: Path, name: str, with_linter: bool = False) -> Path:
    """Create a project directory, optionally with node_modules/.bin/eslint."""
    root = base / name
    root.mkdir()
    if with_linter:
        bin_dir = root / "node_modules" / ".bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "eslint").write_text("#!/usr/bin/env node\n")
    return root


class TestNormalizeRoot:
    """Tests for normalize_root."""

    def test_strips_single_trailing_separator(self) -> None:
        assert normalize_root("/work/app/", platform="linux") == "/work/app"
        assert normalize_root("/work/app//", platform="linux") == "/work/app/"

    def test_keeps_filesystem_root(self) -> None:
        assert normalize_root("/", platform="linux") == "/"

    def test_windows_separators(self) -> None:
        assert normalize_root("C:/work/app/", platform="win32") == "C:\\work\\app"


class TestSearchPathHelpers:
    """Tests for the module-search path helpers."""

    def test_split_empty(self) -> None:
        assert split_search_path(None) == []
        assert split_search_path("") == []

    def test_split_and_join(self) -> None:
        value = os.pathsep.join(["/a", "", "/b"])
        assert split_search_path(value) == ["/a", "/b"]
        assert join_search_path(["/a", "/b"]) == os.pathsep.join(["/a", "/b"])

    def test_rebind_replaces_previous(self) -> None:
        entries = ["/a/node_modules", "/usr/lib/node"]
        result = rebind_search_path(entries, "/a/node_modules", "/b/node_modules")
        assert result == ["/b/node_modules", "/usr/lib/node"]

    def test_rebind_removes_duplicates(self) -> None:
        entries = ["/x", "/b/node_modules", "/x"]
        result = rebind_search_path(entries, None, "/b/node_modules")
        assert result == ["/b/node_modules", "/x"]

    def test_rebind_without_new_dir(self) -> None:
        assert rebind_search_path(["/a", "/b"], "/a", None) == ["/b"]


class TestResolveLinterPath:
    """Tests for resolve_linter_path."""

    def test_project_linter_is_used(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app", with_linter=True)
        expected = root / "node_modules" / ".bin" / "eslint"

        assert resolve_linter_path(str(root), LinterConfig()) == str(expected)

    def test_falls_back_to_global_linter(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app")

        with patch("lintbridge.core.context.shutil.which", return_value="/usr/bin/eslint"):
            assert resolve_linter_path(str(root), LinterConfig()) == "/usr/bin/eslint"

    def test_falls_back_to_bare_name(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app")

        with patch("lintbridge.core.context.shutil.which", return_value=None):
            assert resolve_linter_path(str(root), LinterConfig()) == "eslint"

    def test_directory_is_not_a_linter(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app")
        (root / "node_modules" / ".bin" / "eslint").mkdir(parents=True)

        with patch("lintbridge.core.context.shutil.which", return_value=None):
            assert resolve_linter_path(str(root), LinterConfig()) == "eslint"

    def test_windows_cmd_shim_is_used(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app")
        bin_dir = root / "node_modules" / ".bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "eslint.cmd").write_text("@node eslint.js %*\n")

        with patch("lintbridge.core.context.shutil.which", return_value=None):
            resolved = resolve_linter_path(str(root), LinterConfig(), platform="win32")

        assert resolved == str(bin_dir / "eslint.cmd")

    def test_cmd_shim_ignored_off_windows(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app")
        bin_dir = root / "node_modules" / ".bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "eslint.cmd").touch()

        with patch("lintbridge.core.context.shutil.which", return_value=None):
            assert resolve_linter_path(str(root), LinterConfig(), platform="linux") == "eslint"

    def test_plain_script_preferred_on_windows(self, tmp_path: Path) -> None:
        root = make_project(tmp_path, "app", with_linter=True)
        bin_dir = root / "node_modules" / ".bin"
        (bin_dir / "eslint.cmd").touch()

        resolved = resolve_linter_path(str(root), LinterConfig(), platform="win32")

        assert resolved == str(bin_dir / "eslint")

    def test_linter_candidates(self, tmp_path: Path) -> None:
        bin_dir = tmp_path / "node_modules" / ".bin"

        assert linter_candidates(str(tmp_path), LinterConfig(), platform="linux") == [bin_dir / "eslint"]
        assert linter_candidates(str(tmp_path), LinterConfig(), platform="win32") == [
            bin_dir / "eslint",
            bin_dir / "eslint.cmd",
        ]

    def test_custom_linter_name(self, tmp_path: Path) -> None:
        root = tmp_path / "app"
        bin_dir = root / "tools"
        bin_dir.mkdir(parents=True)
        (bin_dir / "mylint").touch()

        config = LinterConfig(name="mylint", bin_dir="tools")
        assert resolve_linter_path(str(root), config) == str(bin_dir / "mylint")


class TestProjectContext:
    """Tests for ProjectContext.environ."""

    def test_environ_sets_search_var(self) -> None:
        context = ProjectContext(
            root="/a",
            linter_path="eslint",
            module_search_path=("/a/node_modules", "/shared"),
            working_directory="/a",
        )

        env = context.environ({"PATH": "/bin", "NODE_PATH": "/old"})

        assert env["PATH"] == "/bin"
        assert env["NODE_PATH"] == os.pathsep.join(["/a/node_modules", "/shared"])

    def test_environ_drops_empty_search_var(self) -> None:
        context = ProjectContext(
            root=None,
            linter_path="eslint",
            module_search_path=(),
            working_directory="/",
        )

        assert "NODE_PATH" not in context.environ({"NODE_PATH": "/old"})

    def test_environ_does_not_touch_process_env(self) -> None:
        context = ProjectContext(
            root="/a",
            linter_path="eslint",
            module_search_path=("/a/node_modules",),
            working_directory="/a",
        )
        before = os.environ.get("NODE_PATH")

        context.environ()

        assert os.environ.get("NODE_PATH") == before


class TestContextBinder:
    """Tests for ContextBinder.bind."""

    @pytest.fixture
    def binder(self, tmp_path: Path) -> ContextBinder:
        return ContextBinder(
            environ={"NODE_PATH": "/usr/lib/node_modules"},
            default_cwd=str(tmp_path),
        )

    def test_bind_first_project(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_a = make_project(tmp_path, "a", with_linter=True)

        context = binder.bind(str(root_a) + "/")

        assert context.root == str(root_a)
        assert context.working_directory == str(root_a)
        assert context.linter_path == str(root_a / "node_modules" / ".bin" / "eslint")
        assert context.module_search_path == (
            str(root_a / "node_modules"),
            "/usr/lib/node_modules",
        )
        assert binder.active_root == str(root_a)

    def test_switch_project_swaps_module_dir(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_a = make_project(tmp_path, "a")
        root_b = make_project(tmp_path, "b")

        binder.bind(str(root_a))
        context = binder.bind(str(root_b), str(root_a))

        assert context.module_search_path == (
            str(root_b / "node_modules"),
            "/usr/lib/node_modules",
        )
        assert context.working_directory == str(root_b)

    def test_rebinding_same_project_is_idempotent(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_b = make_project(tmp_path, "b")

        first = binder.bind(str(root_b))
        second = binder.bind(str(root_b), str(root_b))
        third = binder.bind(str(root_b))

        assert first.module_search_path == second.module_search_path
        assert list(third.module_search_path).count(str(root_b / "node_modules")) == 1

    def test_refresh_without_root(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_a = make_project(tmp_path, "a")
        binder.bind(str(root_a))

        context = binder.bind(None, str(root_a))

        assert context.root == str(root_a)
        assert context.module_search_path[0] == str(root_a / "node_modules")

    def test_unbound_uses_default_cwd(self, binder: ContextBinder, tmp_path: Path) -> None:
        with patch("lintbridge.core.context.shutil.which", return_value=None):
            context = binder.bind(None)

        assert context.root is None
        assert context.working_directory == str(tmp_path)
        assert context.linter_path == "eslint"
        assert context.module_search_path == ("/usr/lib/node_modules",)

    def test_missing_root_raises_and_keeps_state(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_a = make_project(tmp_path, "a")
        binder.bind(str(root_a))
        before = binder.search_path

        with pytest.raises(ProjectContextError) as exc_info:
            binder.bind(str(tmp_path / "missing"), str(root_a))

        assert "missing" in str(exc_info.value)
        assert binder.active_root == str(root_a)
        assert binder.search_path == before

    def test_binder_never_changes_process_state(self, binder: ContextBinder, tmp_path: Path) -> None:
        root_a = make_project(tmp_path, "a")
        cwd = os.getcwd()
        node_path = os.environ.get("NODE_PATH")

        binder.bind(str(root_a))

        assert os.getcwd() == cwd
        assert os.environ.get("NODE_PATH") == node_path

    def test_module_dir_for(self, tmp_path: Path) -> None:
        assert module_dir_for(str(tmp_path) + "/", LinterConfig()) == str(tmp_path / "node_modules")
