"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.lintbridge.yml)
- Global config (~/.lintbridge/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from lintbridge.config.models import (
    DEFAULT_FIX_ARGS,
    DEFAULT_LINT_ARGS,
    LintBridgeConfig,
    LinterConfig,
    RuntimeConfig,
)
from lintbridge.config.validation import validate_config
from lintbridge.core.errors import LintBridgeError
from lintbridge.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".lintbridge.yml", ".lintbridge.yaml", "lintbridge.yml", "lintbridge.yaml"]
GLOBAL_CONFIG_NAME = "config.yml"

DEFAULT_HOME_DIR_NAME = ".lintbridge"
LINTBRIDGE_HOME_ENV = "LINTBRIDGE_HOME"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(LintBridgeError):
    """Configuration loading or parsing error."""

    pass


def get_lintbridge_home() -> Path:
    """Get the lintbridge home directory.

    Resolution order:
    1. LINTBRIDGE_HOME environment variable (if set)
    2. ~/.lintbridge (default)
    """
    env_home = os.environ.get(LINTBRIDGE_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def load_config(
    project_root: Optional[Path] = None,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> LintBridgeConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.lintbridge.yml)
    3. Global config (~/.lintbridge/config.yml)
    4. Built-in defaults

    Args:
        project_root: Project root directory for finding .lintbridge.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.

    Returns:
        Merged LintBridgeConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path is not None:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = _merge_file(merged, cli_config_path)
        sources.append(f"custom:{cli_config_path}")
    elif project_root is not None:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = _merge_file(merged, project_path)
            sources.append(f"project:{project_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _merge_file(merged: Dict[str, Any], path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    validate_config(data, source=str(path))
    LOGGER.debug(f"Loaded config from {path}")
    return merge_configs(merged, data)


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Searches for .lintbridge.yml, .lintbridge.yaml, lintbridge.yml, lintbridge.yaml
    in the project root directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.lintbridge/config.yml."""
    config_path = get_lintbridge_home() / GLOBAL_CONFIG_NAME
    if config_path.is_file():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> LintBridgeConfig:
    """Convert a merged config dict to a typed LintBridgeConfig.

    Values with the wrong type fall back to the defaults; validation has
    already warned about them.
    """
    linter_data = data.get("linter") or {}
    if not isinstance(linter_data, dict):
        linter_data = {}

    timeout = linter_data.get("timeout")
    if isinstance(timeout, bool):
        timeout = None
    linter = LinterConfig(
        name=_str(linter_data.get("name"), "eslint"),
        bin_dir=_str(linter_data.get("bin_dir"), "node_modules/.bin"),
        modules_dir=_str(linter_data.get("modules_dir"), "node_modules"),
        module_search_var=_str(linter_data.get("module_search_var"), "NODE_PATH"),
        lint_args=_str_list(linter_data.get("lint_args"), DEFAULT_LINT_ARGS),
        fix_args=_str_list(linter_data.get("fix_args"), DEFAULT_FIX_ARGS),
        timeout=float(timeout) if isinstance(timeout, (int, float)) and timeout > 0 else None,
    )

    runtime_data = data.get("runtime") or {}
    if not isinstance(runtime_data, dict):
        runtime_data = {}
    runtime = RuntimeConfig(path=_str(runtime_data.get("path"), "node"))

    surface_errors = data.get("surface_errors", False)

    return LintBridgeConfig(
        linter=linter,
        runtime=runtime,
        surface_errors=surface_errors if isinstance(surface_errors, bool) else False,
    )


def _str(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _str_list(value: Any, default: List[str]) -> List[str]:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return list(default)
