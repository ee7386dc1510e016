"""Editor session route handlers: selection, active panel, open/close state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.dependencies import get_editor_session
from backend.schemas.requests import SessionResponse, SessionUpdate
from backend.services.session import EditorSession

router = APIRouter(prefix="/api/session", tags=["session"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]


def _session_response(session: EditorSession) -> SessionResponse:
    state = session.editor_state
    return SessionResponse(
        is_active=session.is_active,
        last_saved_at=session.last_saved_at,
        selected_block_id=state.selected_block_id,
        editing_block_id=state.editing_block_id,
        active_panel=state.active_panel,
        recent_ids=session.storage.recent_ids(),
    )


@router.get("", response_model=SessionResponse)
async def get_session_state(session: SessionDep) -> SessionResponse:
    """Return the editor UI state and the recently autosaved document ids."""
    return _session_response(session)


@router.patch("", response_model=SessionResponse)
async def update_session_state(session: SessionDep, body: SessionUpdate) -> SessionResponse:
    """Switch the active side panel."""
    session.set_active_panel(body.active_panel)
    return _session_response(session)


@router.put("/selection/{block_id}", response_model=SessionResponse)
async def select_block(session: SessionDep, block_id: str) -> SessionResponse:
    """Select a block; ids not present in the document are ignored."""
    session.select_block(block_id)
    return _session_response(session)


@router.delete("/selection", response_model=SessionResponse)
async def clear_selection(session: SessionDep) -> SessionResponse:
    session.clear_selection()
    return _session_response(session)


@router.post("/close", response_model=SessionResponse)
async def close_editor(session: SessionDep) -> SessionResponse:
    """Return to the home screen; scheduled autosave pauses until a document is opened."""
    session.close()
    return _session_response(session)
