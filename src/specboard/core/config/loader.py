"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import SpecboardConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: SpecboardConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_dir() -> Path:
    """Directory holding specboard's user-level files."""
    return get_xdg_config_home() / "specboard"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/specboard/config.json (or XDG equivalent)
    """
    return get_user_config_dir() / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Project directory (defaults to current directory)

    Returns:
        Path to .specboard.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".specboard.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`; nested
    dicts are merged rather than replaced.

    Example:
        >>> deep_merge({"watch": {"depth": 3, "debounce_ms": 300}},
        ...            {"watch": {"debounce_ms": 100}})
        {'watch': {'depth': 3, 'debounce_ms': 100}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON object file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if missing, unparsable, or not an object
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: top level is not an object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to a broken file
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _env_int(name: str, minimum: int) -> int | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value '{raw}', ignoring")
        return None
    if value < minimum:
        logger.warning(f"{name} must be >= {minimum}, got {value}, ignoring")
        return None
    return value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        SPECBOARD_DEBOUNCE_MS - overrides watch.debounce_ms
        SPECBOARD_POLL_INTERVAL_MS - overrides watch.poll_interval_ms
        SPECBOARD_HOST - overrides server.host
        SPECBOARD_PORT - overrides server.port
        SPECBOARD_ALLOWED_ROOTS - overrides paths.allowed_roots (os.pathsep separated)

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = {key: (dict(value) if isinstance(value, dict) else value)
              for key, value in config_dict.items()}

    if (debounce := _env_int("SPECBOARD_DEBOUNCE_MS", 0)) is not None:
        result.setdefault("watch", {})["debounce_ms"] = debounce

    if (interval := _env_int("SPECBOARD_POLL_INTERVAL_MS", 10)) is not None:
        result.setdefault("watch", {})["poll_interval_ms"] = interval

    if host := os.environ.get("SPECBOARD_HOST"):
        result.setdefault("server", {})["host"] = host

    if (port := _env_int("SPECBOARD_PORT", 1)) is not None:
        result.setdefault("server", {})["port"] = port

    if roots := os.environ.get("SPECBOARD_ALLOWED_ROOTS"):
        result.setdefault("paths", {})["allowed_roots"] = [
            root for root in roots.split(os.pathsep) if root
        ]

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "watch": {"debounce_ms": 300, "poll_interval_ms": 300, "depth": 3},
        "server": {"host": "127.0.0.1", "port": 8080},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> SpecboardConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (SPECBOARD_*)
        2. Project config (.specboard.json)
        3. User config (~/.config/specboard/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .specboard.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated SpecboardConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation

    Example:
        >>> config = load_config()
        >>> config.watch.debounce_ms
        300
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = SpecboardConfig(**merged)
    _config_cache = config
    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
