"""
JSON-file project registry.

The registry maps URL-safe slugs to project directories so the dashboard
can be opened at /projects/<name> instead of a raw path. Records live in a
single JSON array written atomically (temp file + os.replace).

Usage:
    registry = ProjectRegistry(Path("~/.config/specboard/projects.json").expanduser())
    registry.add("my-app", "My App", "/home/me/code/my-app")
    root = registry.resolve("my-app")
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from specboard.core.config.loader import get_user_config_dir
from specboard.core.config.models import SpecboardConfig
from specboard.core.registry.models import ProjectRecord, is_valid_project_name, utc_now

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base class for registry failures."""

    pass


class InvalidProjectNameError(RegistryError):
    """Raised when a project name is not a URL-safe slug."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid project name '{name}': use lowercase letters, numbers and hyphens"
        )


class DuplicateProjectError(RegistryError):
    """Raised when a project name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A project named '{name}' already exists")


class ProjectNotFoundError(RegistryError):
    """Raised when a project name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project not found: {name}")


class RegistryCorruptedError(RegistryError):
    """Raised when the registry file cannot be parsed."""

    pass


def atomic_write_json(path: Path, data: Any) -> None:
    """
    Write JSON to ``path`` atomically.

    The data is written to a temp file in the same directory and moved
    into place with os.replace, so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


class ProjectRegistry:
    """
    Persistent name -> directory registry.

    Example:
        >>> registry = ProjectRegistry(tmp_path / "projects.json")
        >>> registry.add("my-app", "My App", "/home/me/my-app").name
        'my-app'
        >>> [p.name for p in registry.list_projects()]
        ['my-app']
    """

    def __init__(self, path: Path):
        """
        Initialize the registry.

        Args:
            path: JSON file holding the records (created on first write)
        """
        self.path = Path(path)

    def _load(self) -> list[ProjectRecord]:
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise RegistryCorruptedError(f"Registry {self.path} is not a JSON array")
            return [ProjectRecord.model_validate(item) for item in data]
        except (json.JSONDecodeError, ValidationError) as e:
            raise RegistryCorruptedError(f"Registry {self.path} is malformed: {e}") from e

    def _save(self, records: list[ProjectRecord]) -> None:
        atomic_write_json(
            self.path, [record.model_dump(mode="json", by_alias=True) for record in records]
        )

    def list_projects(self) -> list[ProjectRecord]:
        """
        List registered projects.

        Returns:
            Records sorted by last update, newest first
        """
        return sorted(self._load(), key=lambda r: r.updated_at, reverse=True)

    def get(self, name: str) -> ProjectRecord:
        """
        Get one project by name.

        Raises:
            ProjectNotFoundError: If the name is not registered
        """
        for record in self._load():
            if record.name == name:
                return record
        raise ProjectNotFoundError(name)

    def add(self, name: str, display_name: str, file_path: str | Path) -> ProjectRecord:
        """
        Register a project.

        Args:
            name: URL-safe slug
            display_name: Human-readable name
            file_path: Project root directory

        Returns:
            The stored record

        Raises:
            InvalidProjectNameError: If name is not a slug
            DuplicateProjectError: If name is already registered
        """
        if not is_valid_project_name(name):
            raise InvalidProjectNameError(name)

        records = self._load()
        if any(record.name == name for record in records):
            raise DuplicateProjectError(name)

        now = utc_now()
        record = ProjectRecord(
            name=name,
            display_name=display_name,
            file_path=str(file_path),
            created_at=now,
            updated_at=now,
        )
        records.append(record)
        self._save(records)
        logger.info(f"Registered project {name} -> {record.file_path}")
        return record

    def remove(self, name: str) -> ProjectRecord:
        """
        Unregister a project.

        Returns:
            The removed record

        Raises:
            ProjectNotFoundError: If the name is not registered
        """
        records = self._load()
        for index, record in enumerate(records):
            if record.name == name:
                del records[index]
                self._save(records)
                logger.info(f"Removed project {name}")
                return record
        raise ProjectNotFoundError(name)

    def resolve(self, name: str) -> Path:
        """Return the project root registered under ``name``."""
        return Path(self.get(name).file_path)


def registry_from_config(config: SpecboardConfig) -> ProjectRegistry:
    """Registry at the configured path, or projects.json in the user config dir."""
    if config.registry.path:
        return ProjectRegistry(Path(config.registry.path))
    return ProjectRegistry(get_user_config_dir() / "projects.json")
