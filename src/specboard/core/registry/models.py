"""
Registry data models.
"""

import re
from datetime import datetime, timezone

from pydantic import Field, field_validator

from specboard.core.speckit.models import SpecKitModel

# URL-safe slug: lowercase letters and digits, single hyphens between runs
PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_project_name(name: str) -> bool:
    """
    Check that a registry name is a URL-safe slug.

    Example:
        >>> is_valid_project_name("my-app-2")
        True
        >>> is_valid_project_name("My App")
        False
    """
    return bool(PROJECT_NAME_PATTERN.match(name))


class ProjectRecord(SpecKitModel):
    """A registered project: a slug pointing at a directory on disk."""

    name: str = Field(..., description="URL-safe slug, unique within the registry")
    display_name: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1, description="Absolute project root path")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("display_name", "file_path")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v
