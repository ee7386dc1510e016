"""Newsletter document, version snapshot, and editor session schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from backend.schemas.base import CamelModel
from backend.schemas.blocks import Block

RowLayout = Literal["1col", "2col", "3col", "2x2"]
ThemePreset = Literal["northwell", "dark", "minimal", "highcontrast"]
ActivePanel = Literal["blocks", "settings", "theme", "versions"]


class NewsletterMeta(CamelModel):
    """Document identity and bookkeeping.

    ``version`` only moves when a named snapshot is captured; the
    snapshot carries the incremented value, the live document keeps its own.
    """

    id: str
    title: str
    issue_number: str
    created_at: datetime
    updated_at: datetime
    version: int = Field(default=1, ge=1)


class Theme(CamelModel):
    """Colour and font settings applied to the whole document."""

    preset: ThemePreset
    primary_color: str
    accent_color: str
    background_color: str
    surface_color: str
    text_color: str
    muted_color: str
    font_family: str
    heading_family: str


class Row(CamelModel):
    """Ordered group of block ids rendered side by side."""

    id: str
    layout: RowLayout
    block_ids: list[str]


class Newsletter(CamelModel):
    """The full document aggregate.

    Rows define render order top to bottom; ``blocks`` owns every block
    and is keyed by block id.
    """

    meta: NewsletterMeta
    theme: Theme
    rows: list[Row]
    blocks: dict[str, Block]


class SaveVersion(CamelModel):
    """Immutable named snapshot of a document."""

    id: str
    label: str
    saved_at: datetime
    newsletter: Newsletter


class EditorState(CamelModel):
    """Transient selection state of the editing UI."""

    selected_block_id: str | None = None
    editing_block_id: str | None = None
    active_panel: ActivePanel = "blocks"
