"""Read-side queries over a newsletter document."""

from __future__ import annotations

from collections import Counter

from backend.schemas.blocks import Block
from backend.schemas.newsletter import Newsletter, Row


def get_block(newsletter: Newsletter, block_id: str) -> Block | None:
    """Return the block with ``block_id``, or None when it no longer exists."""
    return newsletter.blocks.get(block_id)


def flatten_block_ids(newsletter: Newsletter) -> list[str]:
    """Return every referenced block id in row-then-slot order."""
    return [block_id for row in newsletter.rows for block_id in row.block_ids]


def find_row_index(newsletter: Newsletter, block_id: str) -> int | None:
    """Return the index of the row holding ``block_id``, or None."""
    for index, row in enumerate(newsletter.rows):
        if block_id in row.block_ids:
            return index
    return None


def find_row(newsletter: Newsletter, row_id: str) -> Row | None:
    """Return the row with ``row_id``, or None."""
    return next((row for row in newsletter.rows if row.id == row_id), None)


def is_first_block(newsletter: Newsletter, block_id: str) -> bool:
    ordered = flatten_block_ids(newsletter)
    return bool(ordered) and ordered[0] == block_id


def is_last_block(newsletter: Newsletter, block_id: str) -> bool:
    ordered = flatten_block_ids(newsletter)
    return bool(ordered) and ordered[-1] == block_id


def find_integrity_problems(newsletter: Newsletter) -> list[str]:
    """Check the structural invariants of a document.

    Args:
        newsletter: Document to inspect.

    Returns:
        Human-readable problem descriptions; an empty list means the
        rows and the block map agree exactly.
    """
    problems: list[str] = []

    row_id_counts = Counter(row.id for row in newsletter.rows)
    for row_id, count in row_id_counts.items():
        if count > 1:
            problems.append(f"Row id {row_id} appears {count} times")

    for row in newsletter.rows:
        if not row.block_ids:
            problems.append(f"Row {row.id} has no blocks")

    referenced = flatten_block_ids(newsletter)
    for block_id, count in Counter(referenced).items():
        if count > 1:
            problems.append(f"Block {block_id} is referenced {count} times")

    referenced_set = set(referenced)
    block_keys = set(newsletter.blocks)
    for block_id in sorted(referenced_set - block_keys):
        problems.append(f"Row references missing block {block_id}")
    for block_id in sorted(block_keys - referenced_set):
        problems.append(f"Block {block_id} is not placed in any row")

    for key, block in newsletter.blocks.items():
        if block.id != key:
            problems.append(f"Block map key {key} holds block {block.id}")

    return problems
