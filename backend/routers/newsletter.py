"""Current-document route handlers: the whole newsletter, its meta, and its theme."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from backend.dependencies import get_editor_session
from backend.schemas.requests import ThemePresetResponse, ThemeUpdate
from backend.services.session import EditorSession
from backend.services.themes import THEME_LABELS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/newsletter", tags=["newsletter"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]


@router.get("")
async def get_newsletter(session: SessionDep) -> dict[str, Any]:
    """Return the document currently open in the editor."""
    return session.newsletter.to_json_dict()


@router.post("/new")
async def new_newsletter(session: SessionDep) -> dict[str, Any]:
    """Replace the current document with the starter issue and open the editor."""
    return session.new_newsletter().to_json_dict()


@router.patch("/meta")
async def update_meta(
    session: SessionDep,
    fields: Annotated[dict[str, Any], Body()],
) -> dict[str, Any]:
    """Merge fields into the document meta.

    Args:
        fields: Meta fields by camelCase or snake_case name.

    Raises:
        HTTPException: 422 if the merged meta fails validation.
    """
    try:
        return session.update_meta(fields).to_json_dict()
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


@router.put("/theme")
async def update_theme(session: SessionDep, body: ThemeUpdate) -> dict[str, Any]:
    """Apply a theme preset or merge individual theme fields."""
    if body.preset is not None:
        return session.update_theme(body.preset).to_json_dict()
    try:
        return session.update_theme(body.overrides or {}).to_json_dict()
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


@router.get("/themes", response_model=list[ThemePresetResponse])
async def list_theme_presets() -> list[ThemePresetResponse]:
    """Return the available theme presets with their display labels."""
    return [
        ThemePresetResponse(preset=preset, label=label) for preset, label in THEME_LABELS.items()
    ]
