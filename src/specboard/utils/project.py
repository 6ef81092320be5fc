"""
Project root discovery utilities for specboard.

This module provides functions for recognizing spec-kit projects and
discovering their boundaries by searching for the ``specs/`` or
``.specify/`` marker directories.
"""

from pathlib import Path

SPECS_DIR = "specs"
SPECIFY_DIR = ".specify"

# Markers that indicate a spec-kit project root
PROJECT_ROOT_MARKERS = [
    SPECS_DIR,  # Feature directories
    SPECIFY_DIR,  # spec-kit templates, scripts and memory
]


def is_speckit_project(path: Path | str) -> bool:
    """
    Check whether a directory is a spec-kit project.

    Args:
        path: Directory to check

    Returns:
        True if the directory contains specs/ or .specify/
    """
    directory = Path(path)
    try:
        return any((directory / marker).is_dir() for marker in PROJECT_ROOT_MARKERS)
    except OSError:
        return False


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the project root directory by searching upward for marker directories.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory, or None if not found.

    Example:
        >>> find_project_root()  # From /project/specs/001-auth/
        PosixPath('/project')
    """
    if start is None:
        start = Path.cwd()

    current = start.resolve()
    while True:
        if is_speckit_project(current):
            return current
        if current == current.parent:  # Filesystem root
            return None
        current = current.parent
