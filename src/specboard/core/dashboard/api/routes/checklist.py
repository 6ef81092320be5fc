"""
Checklist API routes.

- POST /api/checklist/toggle - Flip one markdown checkbox in a file
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import Field

from specboard.core.dashboard.api.state import DashboardState, get_state
from specboard.core.speckit.checkbox import toggle_checkbox_in_file
from specboard.core.speckit.models import FileToggleResult, SpecKitModel

router = APIRouter()


class ToggleRequest(SpecKitModel):
    file_path: str = Field(..., min_length=1, description="Markdown file to edit")
    line_index: int = Field(..., ge=0, description="0-based line index of the checkbox")


@router.post("/checklist/toggle", response_model=FileToggleResult)
async def toggle_checklist_item(
    body: ToggleRequest,
    state: DashboardState = Depends(get_state),
) -> FileToggleResult | JSONResponse:
    """
    Toggle the checkbox on one line of a markdown file.

    Returns:
        FileToggleResult with the new state (200), or with an error (400)

    Raises:
        HTTPException: 403 if the file is outside the allowed roots,
            400 if it is not a markdown file
    """
    file_path = state.check_path(body.file_path)
    if file_path.suffix.lower() != ".md":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not a markdown file: {file_path.name}",
        )

    result = toggle_checkbox_in_file(file_path, body.line_index)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result
