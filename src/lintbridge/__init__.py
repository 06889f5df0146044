"""lintbridge - project-aware bridge between an editor host and an external linter."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
