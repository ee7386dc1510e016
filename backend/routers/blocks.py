"""Block route handlers: catalogue, lookup, insertion, edits, and article-grid helpers."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from backend.dependencies import get_editor_session
from backend.schemas.requests import (
    AddBlockRequest,
    AddBlockResponse,
    BlockTypeResponse,
    CommentCreate,
)
from backend.services.document import get_block
from backend.services.registry import BLOCK_LABELS, BLOCK_TYPES
from backend.services.session import EditorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blocks", tags=["blocks"])

SessionDep = Annotated[EditorSession, Depends(get_editor_session)]
FieldsBody = Annotated[dict[str, Any], Body()]


@router.get("/types", response_model=list[BlockTypeResponse])
async def list_block_types() -> list[BlockTypeResponse]:
    """Return every block type in palette order with its display label."""
    return [
        BlockTypeResponse(type=block_type, label=BLOCK_LABELS[block_type])
        for block_type in BLOCK_TYPES
    ]


@router.get("/{block_id}")
async def get_block_by_id(session: SessionDep, block_id: str) -> dict[str, Any]:
    """Return a single block from the current document.

    Raises:
        HTTPException: 404 if no block has this id.
    """
    block = get_block(session.newsletter, block_id)
    if block is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Block {block_id} not found",
        )
    return block.to_json_dict()


@router.post("", response_model=AddBlockResponse, status_code=status.HTTP_201_CREATED)
async def add_block(session: SessionDep, body: AddBlockRequest) -> AddBlockResponse:
    """Insert a default block of the requested type in a new row.

    The row goes right after the anchor block's row, or at the end of the
    document when no anchor is given or the anchor is unknown. The new
    block becomes the selection.
    """
    block_id = session.add_block(body.type, body.anchor_block_id, body.layout)
    logger.info("Added %s block %s", body.type, block_id)
    return AddBlockResponse(block_id=block_id, newsletter=session.newsletter.to_json_dict())


def _invalid_fields(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=exc.errors(include_url=False, include_context=False, include_input=False),
    )


@router.patch("/{block_id}")
async def update_block(session: SessionDep, block_id: str, fields: FieldsBody) -> dict[str, Any]:
    """Merge fields into a block; unknown ids leave the document unchanged.

    Raises:
        HTTPException: 422 if the merged block fails validation.
    """
    try:
        return session.update_block(block_id, fields).to_json_dict()
    except ValidationError as e:
        raise _invalid_fields(e) from e


@router.delete("/{block_id}")
async def remove_block(session: SessionDep, block_id: str) -> dict[str, Any]:
    """Remove a block and any row it leaves empty."""
    return session.remove_block(block_id).to_json_dict()


# --- Article grid helpers ---


@router.post("/{block_id}/articles")
async def add_article(session: SessionDep, block_id: str) -> dict[str, Any]:
    return session.add_article(block_id).to_json_dict()


@router.patch("/{block_id}/articles/{article_id}")
async def update_article(
    session: SessionDep, block_id: str, article_id: str, fields: FieldsBody
) -> dict[str, Any]:
    try:
        return session.update_article(block_id, article_id, fields).to_json_dict()
    except ValidationError as e:
        raise _invalid_fields(e) from e


@router.delete("/{block_id}/articles/{article_id}")
async def remove_article(session: SessionDep, block_id: str, article_id: str) -> dict[str, Any]:
    return session.remove_article(block_id, article_id).to_json_dict()


@router.post("/{block_id}/articles/{article_id}/comments")
async def add_comment(
    session: SessionDep, block_id: str, article_id: str, body: CommentCreate
) -> dict[str, Any]:
    """Append a comment to an article; blank text is ignored."""
    return session.add_comment(
        block_id, article_id, body.author, body.role, body.text
    ).to_json_dict()


@router.delete("/{block_id}/articles/{article_id}/comments/{comment_id}")
async def remove_comment(
    session: SessionDep, block_id: str, article_id: str, comment_id: str
) -> dict[str, Any]:
    return session.remove_comment(block_id, article_id, comment_id).to_json_dict()
