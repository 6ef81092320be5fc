"""Filesystem helpers shared by the CLI and the dashboard API."""

from specboard.utils.paths import (
    PathSafety,
    default_allowed_roots,
    is_path_safe,
    is_valid_directory_path,
    normalize_path,
)
from specboard.utils.project import find_project_root, is_speckit_project

__all__ = [
    "PathSafety",
    "default_allowed_roots",
    "find_project_root",
    "is_path_safe",
    "is_speckit_project",
    "is_valid_directory_path",
    "normalize_path",
]
