"""
Project registry (named projects) and recent-projects list.
"""

from specboard.core.registry.models import ProjectRecord, is_valid_project_name
from specboard.core.registry.recents import (
    JsonRecentStorage,
    MemoryRecentStorage,
    RecentProjects,
    RecentStorage,
    recents_from_config,
)
from specboard.core.registry.store import (
    DuplicateProjectError,
    InvalidProjectNameError,
    ProjectNotFoundError,
    ProjectRegistry,
    RegistryCorruptedError,
    RegistryError,
    registry_from_config,
)

__all__ = [
    "DuplicateProjectError",
    "InvalidProjectNameError",
    "JsonRecentStorage",
    "MemoryRecentStorage",
    "ProjectNotFoundError",
    "ProjectRecord",
    "ProjectRegistry",
    "RecentProjects",
    "RecentStorage",
    "RegistryCorruptedError",
    "RegistryError",
    "is_valid_project_name",
    "recents_from_config",
    "registry_from_config",
]
