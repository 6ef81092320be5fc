"""
Most-recently-used project paths.

RecentProjects holds the ordering rules; where the list is persisted is
decided by the injected RecentStorage.
"""

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from specboard.core.config.loader import get_user_config_dir
from specboard.core.config.models import SpecboardConfig
from specboard.core.registry.store import atomic_write_json

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10


@runtime_checkable
class RecentStorage(Protocol):
    """Persistence for the recent-projects list (newest first)."""

    def load(self) -> list[str]: ...

    def save(self, paths: list[str]) -> None: ...


class MemoryRecentStorage:
    """Keeps the list in memory; used by tests and ephemeral servers."""

    def __init__(self, paths: list[str] | None = None):
        self.paths = list(paths or [])

    def load(self) -> list[str]:
        return list(self.paths)

    def save(self, paths: list[str]) -> None:
        self.paths = list(paths)


class JsonRecentStorage:
    """Keeps the list in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable recent projects file {self.path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring recent projects file {self.path}: not a JSON array")
            return []
        return [item for item in data if isinstance(item, str)]

    def save(self, paths: list[str]) -> None:
        atomic_write_json(self.path, paths)


class RecentProjects:
    """
    Bounded, de-duplicated, newest-first list of project paths.

    Example:
        >>> recents = RecentProjects(MemoryRecentStorage(), limit=2)
        >>> recents.add("/a"); recents.add("/b"); recents.add("/a")
        >>> recents.entries()
        ['/a', '/b']
    """

    def __init__(self, storage: RecentStorage, limit: int = DEFAULT_RECENT_LIMIT):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.storage = storage
        self.limit = limit

    def entries(self) -> list[str]:
        """Recent paths, newest first."""
        return self.storage.load()[: self.limit]

    def add(self, path: str | Path) -> list[str]:
        """
        Move ``path`` to the front of the list.

        Returns:
            The updated list
        """
        entry = str(path)
        paths = [entry] + [p for p in self.storage.load() if p != entry]
        paths = paths[: self.limit]
        self.storage.save(paths)
        return paths

    def remove(self, path: str | Path) -> list[str]:
        entry = str(path)
        paths = [p for p in self.storage.load() if p != entry]
        self.storage.save(paths)
        return paths

    def clear(self) -> None:
        self.storage.save([])


def recents_from_config(
    config: SpecboardConfig, storage: RecentStorage | None = None
) -> RecentProjects:
    """Recent projects backed by ``storage`` or by recent.json in the user config dir."""
    if storage is None:
        path = (
            Path(config.registry.recent_path) if config.registry.recent_path
            else get_user_config_dir() / "recent.json"
        )
        storage = JsonRecentStorage(path)
    return RecentProjects(storage, limit=config.registry.recent_limit)
