"""
Path normalization and the path-safety gate.

Every path that arrives from a client (query parameter or request body)
goes through is_path_safe() before the filesystem is touched. A path is
safe when, after expanding ``~`` and resolving ``..`` and symlinks, it lies
inside one of the allowed roots.
"""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple


class PathSafety(NamedTuple):
    safe: bool
    resolved_path: Path


def default_allowed_roots() -> list[Path]:
    """Home directory plus the usual macOS and Linux user directories."""
    return [Path.home(), Path("/Users"), Path("/home")]


def normalize_path(path: str | Path) -> Path:
    """
    Expand a leading ``~`` to the user's home directory.

    Example:
        >>> normalize_path("~/code/app") == Path.home() / "code" / "app"
        True
    """
    return Path(os.path.expanduser(str(path)))


def is_path_safe(
    path: str | Path, allowed_roots: Iterable[str | Path] | None = None
) -> PathSafety:
    """
    Check whether a path resolves inside an allowed root.

    Containment is checked per path component, so ``/homework`` is not
    inside ``/home``.

    Args:
        path: Requested path (may contain ``~`` or ``..``)
        allowed_roots: Allowed root directories (empty or None uses the defaults)

    Returns:
        PathSafety with the verdict and the fully resolved path
    """
    resolved = normalize_path(path).resolve()
    roots = [normalize_path(r).resolve() for r in (allowed_roots or [])]
    if not roots:
        roots = [r.resolve() for r in default_allowed_roots()]
    safe = any(resolved == root or resolved.is_relative_to(root) for root in roots)
    return PathSafety(safe=safe, resolved_path=resolved)


def is_valid_directory_path(path: str | Path) -> bool:
    """True if the path exists and is a directory."""
    try:
        return normalize_path(path).resolve().is_dir()
    except OSError:
        return False
