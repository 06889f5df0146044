"""Configuration validation for lintbridge.

Warns on unknown keys and wrong value types. Never raises: a config with
warnings still loads, with defaults used where values are unusable.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from lintbridge.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    "linter",
    "runtime",
    "surface_errors",
}

VALID_LINTER_KEYS: Set[str] = {
    "name",
    "bin_dir",
    "modules_dir",
    "module_search_var",
    "lint_args",
    "fix_args",
    "timeout",
}

VALID_RUNTIME_KEYS: Set[str] = {
    "path",
}

LINTER_STRING_KEYS: Set[str] = {"name", "bin_dir", "modules_dir", "module_search_var"}
LINTER_LIST_KEYS: Set[str] = {"lint_args", "fix_args"}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate a configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings (each is also logged).
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        _add(warnings, ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings  # type: ignore[unreachable]

    _check_keys(warnings, data, VALID_TOP_LEVEL_KEYS, source, prefix="")

    linter = data.get("linter")
    if linter is not None:
        if not isinstance(linter, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'linter' must be a mapping, got {type(linter).__name__}",
                source=source,
                key="linter",
            ))
        else:
            _check_keys(warnings, linter, VALID_LINTER_KEYS, source, prefix="linter.")
            _validate_linter(warnings, linter, source)

    runtime = data.get("runtime")
    if runtime is not None:
        if not isinstance(runtime, dict):
            _add(warnings, ConfigValidationWarning(
                message=f"'runtime' must be a mapping, got {type(runtime).__name__}",
                source=source,
                key="runtime",
            ))
        else:
            _check_keys(warnings, runtime, VALID_RUNTIME_KEYS, source, prefix="runtime.")
            path = runtime.get("path")
            if path is not None and not isinstance(path, str):
                _add(warnings, ConfigValidationWarning(
                    message="'runtime.path' must be a string",
                    source=source,
                    key="runtime.path",
                ))

    surface_errors = data.get("surface_errors")
    if surface_errors is not None and not isinstance(surface_errors, bool):
        _add(warnings, ConfigValidationWarning(
            message="'surface_errors' must be a boolean",
            source=source,
            key="surface_errors",
        ))

    return warnings


def _validate_linter(
    warnings: List[ConfigValidationWarning],
    linter: Dict[str, Any],
    source: str,
) -> None:
    for key in sorted(LINTER_STRING_KEYS):
        value = linter.get(key)
        if value is not None and not isinstance(value, str):
            _add(warnings, ConfigValidationWarning(
                message=f"'linter.{key}' must be a string",
                source=source,
                key=f"linter.{key}",
            ))

    for key in sorted(LINTER_LIST_KEYS):
        value = linter.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            _add(warnings, ConfigValidationWarning(
                message=f"'linter.{key}' must be a list of strings",
                source=source,
                key=f"linter.{key}",
            ))

    timeout = linter.get("timeout")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            _add(warnings, ConfigValidationWarning(
                message="'linter.timeout' must be a positive number of seconds",
                source=source,
                key="linter.timeout",
            ))


def _check_keys(
    warnings: List[ConfigValidationWarning],
    section: Dict[str, Any],
    valid_keys: Set[str],
    source: str,
    prefix: str,
) -> None:
    for key in section.keys():
        if key not in valid_keys:
            label = "top-level key" if not prefix else "key"
            _add(warnings, ConfigValidationWarning(
                message=f"Unknown {label} '{prefix}{key}'",
                source=source,
                key=f"{prefix}{key}",
                suggestion=_suggest_key(str(key), valid_keys),
            ))


def _add(warnings: List[ConfigValidationWarning], warning: ConfigValidationWarning) -> None:
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
