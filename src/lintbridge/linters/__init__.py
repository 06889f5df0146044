"""Linter command builders."""

from lintbridge.linters.eslint import ESLintLinter

__all__ = ["ESLintLinter"]
