"""Mutation engine: pure operations producing the next document state.

Every function takes a ``Newsletter`` and returns a new one; inputs are
never modified. Ids that no longer resolve (a block removed by an earlier
action in the same tick, a stale row index) make the operation a no-op
that returns the input document itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from backend.ids import new_id
from backend.schemas.base import merge_model, resolve_field_names
from backend.schemas.blocks import ArticleGridBlock, ArticleItem, BlockType
from backend.schemas.newsletter import Newsletter, Row, RowLayout, ThemePreset
from backend.services.document import find_row_index
from backend.services.registry import create_comment, create_empty_article, create_empty_block
from backend.services.themes import THEMES
from backend.time_utils import utc_now

logger = logging.getLogger(__name__)

_IMMUTABLE_BLOCK_FIELDS = frozenset({"id", "type"})


def _touch(newsletter: Newsletter, **changes: Any) -> Newsletter:
    """Apply top-level changes and refresh ``meta.updated_at``."""
    meta = newsletter.meta.model_copy(update={"updated_at": utc_now()})
    return newsletter.model_copy(update={**changes, "meta": meta})


# --- Blocks ---


def update_block(newsletter: Newsletter, block_id: str, fields: Mapping[str, Any]) -> Newsletter:
    """Merge ``fields`` into a block, keeping its id and type.

    Args:
        newsletter: Current document.
        block_id: Block to update.
        fields: Partial content, keyed by field name or camelCase alias.

    Returns:
        The updated document, or ``newsletter`` unchanged if the block is gone.
    """
    block = newsletter.blocks.get(block_id)
    if block is None:
        return newsletter

    updates = {
        key: value
        for key, value in resolve_field_names(type(block), dict(fields)).items()
        if key not in _IMMUTABLE_BLOCK_FIELDS
    }
    updated = merge_model(block, updates)
    return _touch(newsletter, blocks={**newsletter.blocks, block_id: updated})


def add_block(
    newsletter: Newsletter,
    block_type: BlockType,
    anchor_block_id: str | None = None,
    layout: RowLayout = "1col",
) -> tuple[Newsletter, str]:
    """Insert a default block of ``block_type`` in a new single-block row.

    The row goes directly after the row holding ``anchor_block_id`` when
    that block is found, otherwise at the end of the document. Existing
    rows are never filled further, so no row exceeds its capacity here.

    Returns:
        The updated document and the id of the new block.
    """
    block_id = new_id()
    block = create_empty_block(block_type, block_id)
    row = Row(id=new_id(), layout=layout, block_ids=[block_id])

    rows = list(newsletter.rows)
    anchor_index = find_row_index(newsletter, anchor_block_id) if anchor_block_id else None
    if anchor_index is None:
        rows.append(row)
    else:
        rows.insert(anchor_index + 1, row)

    updated = _touch(newsletter, rows=rows, blocks={**newsletter.blocks, block_id: block})
    return updated, block_id


def remove_block(newsletter: Newsletter, block_id: str) -> Newsletter:
    """Delete a block and prune any row it leaves empty."""
    if block_id not in newsletter.blocks:
        return newsletter

    blocks = {key: value for key, value in newsletter.blocks.items() if key != block_id}
    rows: list[Row] = []
    for row in newsletter.rows:
        if block_id not in row.block_ids:
            rows.append(row)
            continue
        remaining = [bid for bid in row.block_ids if bid != block_id]
        if remaining:
            rows.append(row.model_copy(update={"block_ids": remaining}))
    return _touch(newsletter, rows=rows, blocks=blocks)


# --- Rows ---


def _swap_rows(newsletter: Newsletter, first: int, second: int) -> Newsletter:
    rows = list(newsletter.rows)
    rows[first], rows[second] = rows[second], rows[first]
    return newsletter.model_copy(update={"rows": rows})


def move_row_up(newsletter: Newsletter, row_index: int) -> Newsletter:
    """Swap a row with the one above it; no-op for the first row."""
    if row_index <= 0 or row_index >= len(newsletter.rows):
        return newsletter
    return _swap_rows(newsletter, row_index - 1, row_index)


def move_row_down(newsletter: Newsletter, row_index: int) -> Newsletter:
    """Swap a row with the one below it; no-op for the last row."""
    if row_index < 0 or row_index >= len(newsletter.rows) - 1:
        return newsletter
    return _swap_rows(newsletter, row_index, row_index + 1)


def update_row_layout(newsletter: Newsletter, row_id: str, layout: RowLayout) -> Newsletter:
    """Change a row's layout tag without touching its blocks.

    Capacity is not enforced: a row may keep more blocks than the new
    layout has slots, and the renderer deals with the overflow.
    """
    if not any(row.id == row_id for row in newsletter.rows):
        return newsletter
    rows = [
        row.model_copy(update={"layout": layout}) if row.id == row_id else row
        for row in newsletter.rows
    ]
    return newsletter.model_copy(update={"rows": rows})


# --- Theme & meta ---


def update_theme(
    newsletter: Newsletter,
    preset_or_fields: ThemePreset | Mapping[str, Any],
) -> Newsletter:
    """Replace the theme with a preset, or shallow-merge partial theme fields.

    A string selects a preset; a mapping is merged field by field.
    """
    if isinstance(preset_or_fields, str):
        theme = THEMES.get(preset_or_fields)  # type: ignore[call-overload]
        if theme is None:
            logger.warning("Unknown theme preset %r, theme unchanged", preset_or_fields)
            return newsletter
    else:
        theme = merge_model(newsletter.theme, dict(preset_or_fields))
    return _touch(newsletter, theme=theme)


def update_meta(newsletter: Newsletter, fields: Mapping[str, Any]) -> Newsletter:
    """Shallow-merge metadata fields; ``updated_at`` is always refreshed."""
    merged = merge_model(newsletter.meta, dict(fields))
    meta = merged.model_copy(update={"updated_at": utc_now()})
    return newsletter.model_copy(update={"meta": meta})


# --- Article grid content ---


def _edit_articles(
    newsletter: Newsletter,
    block_id: str,
    edit: Callable[[list[ArticleItem]], list[ArticleItem] | None],
) -> Newsletter:
    """Run ``edit`` over an article grid's articles.

    ``edit`` returns None to signal a no-op (for example an unknown
    article id). Non-grid blocks are left alone.
    """
    block = newsletter.blocks.get(block_id)
    if not isinstance(block, ArticleGridBlock):
        return newsletter
    articles = edit(list(block.articles))
    if articles is None:
        return newsletter
    return update_block(newsletter, block_id, {"articles": articles})


def _replace_article(
    articles: list[ArticleItem],
    article_id: str,
    change: Callable[[ArticleItem], ArticleItem],
) -> list[ArticleItem] | None:
    for index, article in enumerate(articles):
        if article.id == article_id:
            articles[index] = change(article)
            return articles
    return None


def add_article(newsletter: Newsletter, block_id: str) -> Newsletter:
    """Append a placeholder article to an article grid."""
    return _edit_articles(newsletter, block_id, lambda articles: [*articles, create_empty_article()])


def update_article(
    newsletter: Newsletter,
    block_id: str,
    article_id: str,
    fields: Mapping[str, Any],
) -> Newsletter:
    """Merge fields into one article of an article grid."""
    updates = {
        key: value
        for key, value in resolve_field_names(ArticleItem, dict(fields)).items()
        if key != "id"
    }
    return _edit_articles(
        newsletter,
        block_id,
        lambda articles: _replace_article(
            articles, article_id, lambda article: merge_model(article, updates)
        ),
    )


def remove_article(newsletter: Newsletter, block_id: str, article_id: str) -> Newsletter:
    """Remove one article from an article grid."""

    def drop(articles: list[ArticleItem]) -> list[ArticleItem] | None:
        remaining = [article for article in articles if article.id != article_id]
        return remaining if len(remaining) != len(articles) else None

    return _edit_articles(newsletter, block_id, drop)


def add_comment(
    newsletter: Newsletter,
    block_id: str,
    article_id: str,
    author: str,
    role: str,
    text: str,
) -> Newsletter:
    """Append a reviewer comment to an article; blank text is ignored."""
    if not text.strip():
        return newsletter
    comment = create_comment(author, role, text)
    return _edit_articles(
        newsletter,
        block_id,
        lambda articles: _replace_article(
            articles,
            article_id,
            lambda article: article.model_copy(update={"comments": [*article.comments, comment]}),
        ),
    )


def remove_comment(
    newsletter: Newsletter,
    block_id: str,
    article_id: str,
    comment_id: str,
) -> Newsletter:
    """Delete a reviewer comment from an article."""

    def drop(article: ArticleItem) -> ArticleItem:
        kept = [comment for comment in article.comments if comment.id != comment_id]
        return article.model_copy(update={"comments": kept})

    def edit(articles: list[ArticleItem]) -> list[ArticleItem] | None:
        target = next((a for a in articles if a.id == article_id), None)
        if target is None or all(c.id != comment_id for c in target.comments):
            return None
        return _replace_article(articles, article_id, drop)

    return _edit_articles(newsletter, block_id, edit)
