"""
Directory browser for picking a project root.

- GET /api/browse?path= - Child directories of a path, spec-kit projects first
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, status

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.speckit.models import SpecKitModel
from specboard.utils.project import is_speckit_project

logger = logging.getLogger(__name__)

router = APIRouter()


class DirectoryEntry(SpecKitModel):
    name: str
    path: str
    is_directory: bool = True
    is_spec_kit_project: bool = False


class BrowseResponse(SpecKitModel):
    current_path: str
    parent_path: str
    entries: list[DirectoryEntry]
    is_spec_kit_project: bool


@router.get("/browse", response_model=BrowseResponse)
async def browse(
    path: str | None = Query(default=None, description="Directory to list (defaults to home)"),
    state: DashboardState = Depends(get_state),
) -> BrowseResponse:
    """
    List the non-hidden child directories of ``path``.

    Raises:
        HTTPException: 403 outside the allowed roots, 404 if missing,
            400 if not a directory, 500 if it cannot be listed
    """
    directory = state.check_path(path or str(Path.home()))
    if not directory.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Directory does not exist")
    if not directory.is_dir():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Path is not a directory")

    try:
        children = [
            child for child in directory.iterdir()
            if child.is_dir() and not child.name.startswith(".")
        ]
    except OSError as e:
        logger.error(f"Failed to browse {directory}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to read directory: {directory}",
        ) from e

    entries = [
        DirectoryEntry(
            name=child.name,
            path=str(child),
            is_spec_kit_project=is_speckit_project(child),
        )
        for child in children
    ]
    entries.sort(key=lambda e: (not e.is_spec_kit_project, e.name.lower()))

    return BrowseResponse(
        current_path=str(directory),
        parent_path=str(directory.parent),
        entries=entries,
        is_spec_kit_project=is_speckit_project(directory),
    )
