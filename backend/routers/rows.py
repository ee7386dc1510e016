"""Row route handlers: reordering and layout changes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from backend.dependencies import get_editor_session
from backend.schemas.requests import RowLayoutUpdate
from backend.services.session import EditorSession

router = APIRouter(prefix="/api/rows", tags=["rows"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]


@router.post("/{row_index}/move-up")
async def move_row_up(session: SessionDep, row_index: int) -> dict[str, Any]:
    """Swap a row with the one above it; the first row stays put."""
    return session.move_row_up(row_index).to_json_dict()


@router.post("/{row_index}/move-down")
async def move_row_down(session: SessionDep, row_index: int) -> dict[str, Any]:
    """Swap a row with the one below it; the last row stays put."""
    return session.move_row_down(row_index).to_json_dict()


@router.put("/{row_id}/layout")
async def update_row_layout(
    session: SessionDep, row_id: str, body: RowLayoutUpdate
) -> dict[str, Any]:
    """Change a row's layout tag without moving any blocks."""
    return session.update_row_layout(row_id, body.layout).to_json_dict()
