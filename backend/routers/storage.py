"""Persistence route handlers: autosave slot, recent ids, and saved versions."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from backend.dependencies import get_editor_session
from backend.schemas.newsletter import SaveVersion
from backend.schemas.requests import SaveVersionRequest, VersionSummary
from backend.services.session import EditorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/storage", tags=["storage"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]


def _summarise(version: SaveVersion) -> VersionSummary:
    return VersionSummary(
        id=version.id,
        label=version.label,
        saved_at=version.saved_at,
        version=version.newsletter.meta.version,
    )


@router.post("/autosave")
async def autosave(session: SessionDep) -> dict[str, Any]:
    """Write the current document to the autosave slot.

    A storage failure is reported as ``saved: false`` rather than an error.
    """
    saved = session.autosave()
    return {
        "saved": saved,
        "lastSavedAt": session.last_saved_at.isoformat() if session.last_saved_at else None,
    }


@router.post("/autosave/restore")
async def restore_autosave(session: SessionDep) -> dict[str, Any]:
    """Open the autosaved document, or a new starter issue if none is stored."""
    restored = session.restore_autosave()
    return {"restored": restored, "newsletter": session.newsletter.to_json_dict()}


@router.get("/recent", response_model=list[str])
async def list_recent(session: SessionDep) -> list[str]:
    """Return recently autosaved document ids, newest first."""
    return session.storage.recent_ids()


@router.get("/versions", response_model=list[VersionSummary])
async def list_versions(session: SessionDep) -> list[VersionSummary]:
    """Return saved versions, newest first, without their documents."""
    return [_summarise(version) for version in session.storage.versions]


@router.post(
    "/versions", response_model=VersionSummary, status_code=status.HTTP_201_CREATED
)
async def save_version(session: SessionDep, body: SaveVersionRequest) -> VersionSummary:
    """Snapshot the current document and autosave it."""
    return _summarise(session.save_version(body.label))


@router.delete("/versions/{version_id}")
async def delete_version(session: SessionDep, version_id: str) -> dict[str, bool]:
    """Delete a saved version; unknown ids report ``deleted: false``."""
    return {"deleted": session.storage.delete_version(version_id)}


@router.post("/versions/{version_id}/restore")
async def restore_version(session: SessionDep, version_id: str) -> dict[str, Any]:
    """Replace the current document with a saved version's snapshot.

    Raises:
        HTTPException: 404 if no version has this id.
    """
    if not session.restore_version(version_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Version {version_id} not found",
        )
    logger.info("Restored version %s", version_id)
    return session.newsletter.to_json_dict()
