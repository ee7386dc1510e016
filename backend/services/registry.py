"""Block registry: default ("empty") instances for every block variant.

This module is the single source of truth for what a freshly inserted
block of each type looks like. ``create_empty_block`` matches every
``BlockType`` literal and ends in ``assert_never``, so adding a variant
without a default here fails type checking.
"""

from __future__ import annotations

from typing import assert_never, get_args

from backend.ids import new_id
from backend.schemas.blocks import (
    ArticleComment,
    ArticleGridBlock,
    ArticleItem,
    Block,
    BlockType,
    EthicsSplitBlock,
    FooterBlock,
    HeaderBlock,
    HistoryBlock,
    HumorBlock,
    ImageBlock,
    PromptMasterclassBlock,
    SbarPromptBlock,
    SbarStep,
    SectionDividerBlock,
    SpacerBlock,
    SpotlightBlock,
    TermOfMonthBlock,
    TextBlock,
    TickerBlock,
)
from backend.schemas.newsletter import RowLayout
from backend.time_utils import display_date, utc_now

BLOCK_TYPES: tuple[BlockType, ...] = get_args(BlockType)

BLOCK_LABELS: dict[BlockType, str] = {
    "header": "Header",
    "ticker": "Scrolling Ticker",
    "section-divider": "Section Divider",
    "article-grid": "Article Grid",
    "spotlight": "Spotlight Article",
    "ethics-split": "Ethics Split",
    "image": "Image",
    "text": "Text Block",
    "prompt-masterclass": "Prompt Masterclass",
    "sbar-prompt": "SBAR-P Framework",
    "term-of-month": "Term of the Month",
    "history": "History Block",
    "humor": "Humor Block",
    "spacer": "Spacer",
    "footer": "Footer",
}

LAYOUT_CAPACITY: dict[RowLayout, int] = {
    "1col": 1,
    "2col": 2,
    "3col": 3,
    "2x2": 4,
}

_SBAR_STEP_NAMES = (
    ("S", "Situation"),
    ("B", "Background"),
    ("A", "Ask"),
    ("R", "Role"),
    ("P", "Parameters"),
)


def max_blocks_for_layout(layout: RowLayout) -> int:
    """Return how many block slots a row layout provides."""
    return LAYOUT_CAPACITY[layout]


def create_empty_article() -> ArticleItem:
    """Return a placeholder article card with a fresh id."""
    return ArticleItem(
        id=new_id(),
        title="New Article",
        source="Journal",
        url="",
        image_url="",
        summary="Article summary here.",
        clinical_review="Clinical review here.",
        my_view="My view here.",
        evidence_level="Moderate",
        comments=[],
    )


def create_comment(author: str, role: str, text: str) -> ArticleComment:
    """Build a reviewer comment stamped with the current time.

    Blank authors are recorded as ``Anonymous``.
    """
    return ArticleComment(
        id=new_id(),
        author=author.strip() or "Anonymous",
        role=role.strip(),
        text=text.strip(),
        timestamp=utc_now(),
    )


def create_empty_block(block_type: BlockType, block_id: str) -> Block:
    """Build the default instance of a block variant.

    Args:
        block_type: Variant tag of the block to create.
        block_id: Identifier assigned to the new block.

    Returns:
        A block with every required content field populated.
    """
    match block_type:
        case "header":
            return HeaderBlock(
                id=block_id,
                title="Neurology AI Pulse",
                subtitle="AI in Clinical Neuroscience",
                issue_number="Issue 001",
                issue_date=display_date(utc_now()),
                tagline="",
            )
        case "ticker":
            return TickerBlock(id=block_id, items=["New headline here"], speed="medium")
        case "section-divider":
            return SectionDividerBlock(id=block_id, label="SECTION", style="gradient")
        case "article-grid":
            return ArticleGridBlock(
                id=block_id,
                section_title="Top Stories",
                articles=[create_empty_article()],
                columns=2,
            )
        case "spotlight":
            return SpotlightBlock(
                id=block_id,
                title="Spotlight Title",
                source="Journal",
                url="",
                summary="Summary here.",
                clinical_review="Clinical review here.",
                my_view="My view here.",
                evidence_level="Moderate",
            )
        case "ethics-split":
            return EthicsSplitBlock(
                id=block_id, topic="Ethics Topic", issue="The issue...", my_view="My view..."
            )
        case "image":
            return ImageBlock(
                id=block_id,
                image_url="",
                caption="Image caption",
                alt_text="Image",
                alignment="center",
            )
        case "text":
            return TextBlock(id=block_id, heading="", content="Text content here.")
        case "prompt-masterclass":
            return PromptMasterclassBlock(
                id=block_id,
                title="Prompt Masterclass",
                prompt="Your prompt here...",
                explanation="Explanation...",
                use_case="Use case...",
            )
        case "sbar-prompt":
            return SbarPromptBlock(
                id=block_id,
                title="SBAR-P Prompt Framework",
                intro="Structure clinical prompts the way you structure a handover.",
                steps=[
                    SbarStep(letter=letter, name=name, description="", example="")
                    for letter, name in _SBAR_STEP_NAMES
                ],
                prompt_template="Act as a [SPECIALTY] specialist.",
                safety_notes=["Verify all outputs against the primary source."],
            )
        case "term-of-month":
            return TermOfMonthBlock(
                id=block_id,
                term="Term",
                definition="Definition here.",
                clinical_context="Clinical context here.",
            )
        case "history":
            return HistoryBlock(
                id=block_id,
                year=str(utc_now().year),
                title="Historical Event",
                content="Historical content here.",
            )
        case "humor":
            return HumorBlock(
                id=block_id, heading="Humor Break", content="Humor content here.", attribution=""
            )
        case "spacer":
            return SpacerBlock(id=block_id, height=24)
        case "footer":
            return FooterBlock(
                id=block_id,
                institution="Institution",
                department="Department",
                unsubscribe_url="#",
                website_url="#",
                copyright_year=str(utc_now().year),
                disclaimer="",
                socials=[],
                contributors=[],
            )
        case _:
            assert_never(block_type)
