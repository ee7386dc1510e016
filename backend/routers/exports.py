"""Export and import route handlers: JSON interchange, standalone HTML, print page."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import HTMLResponse

from backend.dependencies import get_editor_session
from backend.schemas.requests import HtmlExportRequest
from backend.services.export import build_export_html, build_print_html, html_export_filename
from backend.services.persistence import InvalidNewsletterFileError
from backend.services.session import EditorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exports", tags=["exports"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/json")
async def export_json(session: SessionDep) -> Response:
    """Download the current document as interchange JSON."""
    exported = session.storage.export_json(session.newsletter)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers=_attachment(exported.filename),
    )


@router.post("/json")
async def import_json(
    session: SessionDep, file: Annotated[UploadFile, File()]
) -> dict[str, Any]:
    """Replace the current document with an uploaded JSON export.

    Raises:
        HTTPException: 400 if the file is not a valid newsletter document.
    """
    content = await file.read()
    try:
        newsletter = await session.storage.import_json(content, name=file.filename)
    except InvalidNewsletterFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    logger.info("Imported newsletter %s from %s", newsletter.meta.id, file.filename)
    return session.import_newsletter(newsletter).to_json_dict()


@router.post("/html", response_class=HTMLResponse)
async def export_html(session: SessionDep, body: HtmlExportRequest) -> HTMLResponse:
    """Download the rendered preview as a standalone HTML file."""
    page = build_export_html(session.newsletter, body.markup, body.styles)
    return HTMLResponse(
        content=page,
        headers=_attachment(html_export_filename(session.newsletter.meta)),
    )


@router.post("/print", response_class=HTMLResponse)
async def export_print(session: SessionDep, body: HtmlExportRequest) -> HTMLResponse:
    """Return a print-ready page that opens the browser's print dialog once assets load."""
    return HTMLResponse(content=build_print_html(session.newsletter, body.markup, body.styles))
