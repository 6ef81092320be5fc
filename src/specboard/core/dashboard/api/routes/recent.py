"""
Recent projects API routes.

- GET /api/recent - Recently opened project paths, newest first
- POST /api/recent - Move a path to the front of the list
"""

from fastapi import APIRouter, Depends
from pydantic import Field

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.speckit.models import SpecKitModel

router = APIRouter()


class RecentRequest(SpecKitModel):
    path: str = Field(..., min_length=1)


class RecentResponse(SpecKitModel):
    paths: list[str]


@router.get("/recent", response_model=RecentResponse)
async def get_recent(state: DashboardState = Depends(get_state)) -> RecentResponse:
    return RecentResponse(paths=state.recents.entries())


@router.post("/recent", response_model=RecentResponse)
async def add_recent(
    body: RecentRequest,
    state: DashboardState = Depends(get_state),
) -> RecentResponse:
    root = state.check_path(body.path)
    return RecentResponse(paths=state.recents.add(root))
