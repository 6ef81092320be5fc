"""
Project registry API routes.

- GET /api/projects - List registered projects (newest update first)
- POST /api/projects - Register a project
- GET /api/projects/{name} - Look up one project
- DELETE /api/projects/{name} - Unregister a project

Registry errors propagate to the handlers in app.py, which map them to
400/404/409 responses.
"""

from fastapi import APIRouter, Depends, status
from pydantic import ConfigDict, Field

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.registry.models import ProjectRecord
from specboard.core.speckit.models import SpecKitModel

router = APIRouter()


class CreateProjectRequest(SpecKitModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="URL-safe slug")
    display_name: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)


@router.get("/projects", response_model=list[ProjectRecord])
async def list_projects(state: DashboardState = Depends(get_state)) -> list[ProjectRecord]:
    return state.registry.list_projects()


@router.post("/projects", response_model=ProjectRecord, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: CreateProjectRequest,
    state: DashboardState = Depends(get_state),
) -> ProjectRecord:
    """Register a project. The directory must pass the path-safety gate."""
    root = state.check_path(body.file_path)
    return state.registry.add(body.name, body.display_name, root)


@router.get("/projects/{name}", response_model=ProjectRecord)
async def get_project_record(
    name: str,
    state: DashboardState = Depends(get_state),
) -> ProjectRecord:
    return state.registry.get(name)


@router.delete("/projects/{name}", response_model=ProjectRecord)
async def delete_project(
    name: str,
    state: DashboardState = Depends(get_state),
) -> ProjectRecord:
    return state.registry.remove(name)
