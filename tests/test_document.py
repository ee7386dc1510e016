"""Read-side document query tests."""

from backend.schemas.newsletter import Newsletter, Row
from backend.services.document import (
    find_integrity_problems,
    find_row,
    find_row_index,
    flatten_block_ids,
    get_block,
    is_first_block,
    is_last_block,
)


def test_default_newsletter_has_no_integrity_problems(newsletter: Newsletter) -> None:
    assert find_integrity_problems(newsletter) == []


def test_default_newsletter_layout(newsletter: Newsletter) -> None:
    assert len(newsletter.blocks) == 13
    assert len(newsletter.rows) == 11
    assert [row.layout for row in newsletter.rows].count("2col") == 2
    assert newsletter.theme.preset == "northwell"
    assert newsletter.meta.version == 1


def test_get_block_returns_none_for_unknown_id(newsletter: Newsletter) -> None:
    first_id = newsletter.rows[0].block_ids[0]

    assert get_block(newsletter, first_id) is newsletter.blocks[first_id]
    assert get_block(newsletter, "missing") is None


def test_flatten_block_ids_follows_row_then_slot_order(newsletter: Newsletter) -> None:
    ordered = flatten_block_ids(newsletter)

    assert len(ordered) == 13
    assert newsletter.blocks[ordered[0]].type == "header"
    assert newsletter.blocks[ordered[-1]].type == "footer"
    assert [newsletter.blocks[bid].type for bid in ordered[6:8]] == ["ethics-split", "sbar-prompt"]


def test_find_row_index_and_find_row(newsletter: Newsletter) -> None:
    two_col = newsletter.rows[6]

    assert find_row_index(newsletter, two_col.block_ids[1]) == 6
    assert find_row_index(newsletter, "missing") is None
    assert find_row(newsletter, two_col.id) == two_col
    assert find_row(newsletter, "missing") is None


def test_first_and_last_block_boundaries(newsletter: Newsletter) -> None:
    ordered = flatten_block_ids(newsletter)

    assert is_first_block(newsletter, ordered[0])
    assert not is_first_block(newsletter, ordered[1])
    assert is_last_block(newsletter, ordered[-1])
    assert not is_last_block(newsletter, "missing")


def test_integrity_reports_empty_rows_and_dangling_references(newsletter: Newsletter) -> None:
    broken = newsletter.model_copy(
        update={
            "rows": [
                *newsletter.rows,
                Row(id="empty", layout="1col", block_ids=[]),
                Row(id="dangling", layout="1col", block_ids=["ghost"]),
            ]
        }
    )

    problems = find_integrity_problems(broken)

    assert "Row empty has no blocks" in problems
    assert "Row references missing block ghost" in problems


def test_integrity_reports_orphans_and_shared_ids(newsletter: Newsletter) -> None:
    first_row, *rest = newsletter.rows
    shared = rest[0].model_copy(update={"block_ids": [*rest[0].block_ids, first_row.block_ids[0]]})
    broken = newsletter.model_copy(update={"rows": [first_row, shared, *rest[2:]]})

    problems = find_integrity_problems(broken)
    orphan_id = rest[1].block_ids[0]

    assert f"Block {first_row.block_ids[0]} is referenced 2 times" in problems
    assert f"Block {orphan_id} is not placed in any row" in problems
