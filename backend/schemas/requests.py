"""Request and response bodies for the editor API."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from backend.schemas.base import CamelModel
from backend.schemas.blocks import BlockType
from backend.schemas.newsletter import ActivePanel, RowLayout, ThemePreset


class AddBlockRequest(CamelModel):
    """Body for inserting a new block in its own row."""

    type: BlockType
    anchor_block_id: str | None = None
    layout: RowLayout = "1col"


class AddBlockResponse(CamelModel):
    block_id: str
    newsletter: dict[str, Any]


class RowLayoutUpdate(CamelModel):
    layout: RowLayout


class ThemeUpdate(CamelModel):
    """Theme change: either a preset name or a partial field set, never both."""

    preset: ThemePreset | None = None
    overrides: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _exactly_one_shape(self) -> "ThemeUpdate":
        if (self.preset is None) == (self.overrides is None):
            raise ValueError("Provide exactly one of 'preset' or 'overrides'")
        return self


class CommentCreate(CamelModel):
    author: str = ""
    role: str = ""
    text: str


class SessionUpdate(CamelModel):
    active_panel: ActivePanel


class SaveVersionRequest(CamelModel):
    label: str | None = None


class VersionSummary(CamelModel):
    """Version list entry without the embedded document."""

    id: str
    label: str
    saved_at: datetime
    version: int


class HtmlExportRequest(CamelModel):
    """Rendered preview markup plus the style rules collected from the page."""

    markup: str
    styles: str = ""


class ThemePresetResponse(CamelModel):
    preset: ThemePreset
    label: str


class BlockTypeResponse(CamelModel):
    type: BlockType
    label: str


class SessionResponse(CamelModel):
    is_active: bool
    last_saved_at: datetime | None = None
    selected_block_id: str | None = None
    editing_block_id: str | None = None
    active_panel: ActivePanel
    recent_ids: list[str] = Field(default_factory=list)
