"""
Project API routes for the dashboard.

Provides endpoints for reading a spec-kit project from disk:
- GET /api/project?path= - Full project snapshot
- GET /api/project/metrics?path= - Dashboard roll-ups
- GET /api/project/board?path= - Kanban columns
"""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, status

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.dashboard.board import Board, build_board
from specboard.core.speckit.metrics import compute_metrics
from specboard.core.speckit.models import DashboardMetrics, Project

router = APIRouter()

PATH_QUERY = Query(..., min_length=1, description="Project root directory (~ allowed)")


async def _scan(state: DashboardState, path: str) -> tuple[Path, Project | None]:
    root = state.check_path(path)
    return root, await state.scanner.scan_async(root)


@router.get("/project", response_model=Project)
async def get_project(
    path: str = PATH_QUERY,
    state: DashboardState = Depends(get_state),
) -> Project:
    """
    Scan a project and return its snapshot.

    Raises:
        HTTPException: 403 if the path is outside the allowed roots,
            404 if the directory is not a spec-kit project
    """
    root, project = await _scan(state, path)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No spec-kit project data at {root}",
        )
    return project


@router.get("/project/metrics", response_model=DashboardMetrics)
async def get_project_metrics(
    path: str = PATH_QUERY,
    state: DashboardState = Depends(get_state),
) -> DashboardMetrics:
    """
    Dashboard metrics for a project.

    A directory that is not a spec-kit project yields all-zero metrics.
    """
    _, project = await _scan(state, path)
    return compute_metrics(project)


@router.get("/project/board", response_model=Board)
async def get_project_board(
    path: str = PATH_QUERY,
    state: DashboardState = Depends(get_state),
) -> Board:
    """Features laid out in kanban columns (empty columns for a non-project)."""
    _, project = await _scan(state, path)
    return build_board(project)
