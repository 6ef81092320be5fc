"""
Seeding SPECBOARD_* settings from .env files.

Only keys with the SPECBOARD_ prefix are taken; a project's .env holds
plenty of unrelated secrets that specboard has no business exporting.
Files are read lowest precedence first:

    ~/.config/specboard/.env < <project>/.env < <project>/.env.local

and the merged values fill in only variables the shell has not already
set, so apply_env_overrides() sees OS env > project .env > user .env.
"""

import logging
import os
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_user_config_dir

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPECBOARD_"


def dotenv_paths(project_dir: Path | None = None) -> list[Path]:
    """The .env files consulted for a project, lowest precedence first."""
    if project_dir is None:
        project_dir = Path.cwd()
    return [
        get_user_config_dir() / ".env",
        project_dir / ".env",
        project_dir / ".env.local",
    ]


def read_dotenv_settings(paths: list[Path]) -> dict[str, str]:
    """
    Merge the SPECBOARD_* entries of several .env files.

    Later files win. Missing files are skipped and keys without a value
    (a bare ``SPECBOARD_PORT`` line) are ignored.
    """
    merged: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(ENV_PREFIX):
                merged[key] = value
    return merged


def load_layered_env(project_dir: Path | None = None) -> dict[str, str]:
    """
    Export .env settings that the shell has not already set.

    Args:
        project_dir: Project root holding .env/.env.local (defaults to cwd)

    Returns:
        The variables this call exported
    """
    settings = read_dotenv_settings(dotenv_paths(project_dir))
    exported = {key: value for key, value in settings.items() if key not in os.environ}
    os.environ.update(exported)
    if exported:
        logger.debug(f"Loaded {', '.join(sorted(exported))} from .env files")
    return exported
