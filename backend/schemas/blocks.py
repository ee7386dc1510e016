"""Block schemas: the closed set of newsletter content variants."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from backend.schemas.base import CamelModel

BlockType = Literal[
    "header",
    "ticker",
    "section-divider",
    "article-grid",
    "spotlight",
    "ethics-split",
    "image",
    "text",
    "prompt-masterclass",
    "sbar-prompt",
    "term-of-month",
    "history",
    "humor",
    "spacer",
    "footer",
]

EvidenceLevel = Literal["High", "Moderate", "Low", "Expert Opinion"]
BlockWidth = Literal["25", "50", "75", "100"]


# --- Nested records ---


class ArticleComment(CamelModel):
    """Reviewer comment attached to an article."""

    id: str
    author: str
    role: str
    text: str
    timestamp: datetime


class ArticleItem(CamelModel):
    """Single article card inside an article grid."""

    id: str
    title: str
    source: str
    url: str
    image_url: str | None = None
    summary: str
    clinical_review: str
    my_view: str
    evidence_level: EvidenceLevel
    comments: list[ArticleComment] = Field(default_factory=list)


class SbarStep(CamelModel):
    """One letter of the SBAR-P prompting framework."""

    letter: str
    name: str
    description: str
    example: str


class SocialLink(CamelModel):
    platform: str
    url: str


class Contributor(CamelModel):
    """Person credited in the footer."""

    id: str
    name: str
    role: str
    url: str | None = None


# --- Blocks ---


class BlockBase(CamelModel):
    """Fields shared by every block variant.

    The visual overrides are optional; the renderer falls back to the
    document theme when they are unset.
    """

    id: str
    block_bg_color: str | None = None
    block_text_color: str | None = None
    block_padding: int | None = None
    block_font_size: int | None = None
    block_width: BlockWidth | None = None


class HeaderBlock(BlockBase):
    type: Literal["header"] = "header"
    logo_url: str | None = None
    use_animated_logo: bool | None = None
    animated_logo_size: int | None = None
    title: str
    subtitle: str
    issue_number: str
    issue_date: str
    tagline: str


class TickerBlock(BlockBase):
    type: Literal["ticker"] = "ticker"
    items: list[str]
    speed: Literal["slow", "medium", "fast"]


class SectionDividerBlock(BlockBase):
    type: Literal["section-divider"] = "section-divider"
    label: str
    style: Literal["line", "gradient", "icon"]


class ArticleGridBlock(BlockBase):
    type: Literal["article-grid"] = "article-grid"
    section_title: str
    articles: list[ArticleItem]
    columns: Literal[1, 2, 3]


class SpotlightBlock(BlockBase):
    type: Literal["spotlight"] = "spotlight"
    title: str
    source: str
    url: str
    summary: str
    clinical_review: str
    my_view: str
    evidence_level: EvidenceLevel
    image_url: str | None = None


class EthicsSplitBlock(BlockBase):
    type: Literal["ethics-split"] = "ethics-split"
    topic: str
    issue: str
    my_view: str


class ImageBlock(BlockBase):
    type: Literal["image"] = "image"
    image_url: str
    caption: str
    credit: str | None = None
    alt_text: str
    alignment: Literal["left", "center", "right"]


class TextBlock(BlockBase):
    """Free-text block; ``content`` is HTML from the rich-text editor."""

    type: Literal["text"] = "text"
    content: str
    heading: str | None = None


class PromptMasterclassBlock(BlockBase):
    type: Literal["prompt-masterclass"] = "prompt-masterclass"
    title: str
    prompt: str
    explanation: str
    use_case: str


class SbarPromptBlock(BlockBase):
    type: Literal["sbar-prompt"] = "sbar-prompt"
    title: str
    intro: str
    steps: list[SbarStep]
    prompt_template: str
    safety_notes: list[str]


class TermOfMonthBlock(BlockBase):
    type: Literal["term-of-month"] = "term-of-month"
    term: str
    definition: str
    clinical_context: str


class HistoryBlock(BlockBase):
    type: Literal["history"] = "history"
    year: str
    title: str
    content: str


class HumorBlock(BlockBase):
    type: Literal["humor"] = "humor"
    heading: str
    content: str
    attribution: str | None = None


class SpacerBlock(BlockBase):
    type: Literal["spacer"] = "spacer"
    height: int


class FooterBlock(BlockBase):
    type: Literal["footer"] = "footer"
    institution: str
    department: str
    contact_email: str | None = None
    unsubscribe_url: str
    website_url: str
    copyright_year: str
    disclaimer: str
    socials: list[SocialLink] = Field(default_factory=list)
    contributors: list[Contributor] = Field(default_factory=list)


Block = Annotated[
    HeaderBlock
    | TickerBlock
    | SectionDividerBlock
    | ArticleGridBlock
    | SpotlightBlock
    | EthicsSplitBlock
    | ImageBlock
    | TextBlock
    | PromptMasterclassBlock
    | SbarPromptBlock
    | TermOfMonthBlock
    | HistoryBlock
    | HumorBlock
    | SpacerBlock
    | FooterBlock,
    Field(discriminator="type"),
]
