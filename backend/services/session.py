"""Editor session: the live document, UI selection state, and save actions.

A session threads every mutation through the engine, replacing its
document with each result, so autosave always reads the latest
completed state. The session owns its ``NewsletterStorage``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from backend.schemas.blocks import BlockType
from backend.schemas.newsletter import (
    ActivePanel,
    EditorState,
    Newsletter,
    RowLayout,
    SaveVersion,
    ThemePreset,
)
from backend.services import mutations
from backend.services.defaults import create_default_newsletter
from backend.services.persistence import NewsletterStorage
from backend.time_utils import utc_now

logger = logging.getLogger(__name__)


class EditorSession:
    """State holder for one editing session."""

    def __init__(self, storage: NewsletterStorage, newsletter: Newsletter | None = None) -> None:
        self.storage = storage
        self.newsletter = newsletter if newsletter is not None else create_default_newsletter()
        self.editor_state = EditorState()
        self.is_active = False
        self.last_saved_at: datetime | None = None

    # --- Selection ---

    def select_block(self, block_id: str) -> bool:
        """Select a block; ids that are not in the document are ignored."""
        if block_id not in self.newsletter.blocks:
            return False
        self.editor_state = self.editor_state.model_copy(update={"selected_block_id": block_id})
        return True

    def clear_selection(self) -> None:
        self.editor_state = self.editor_state.model_copy(
            update={"selected_block_id": None, "editing_block_id": None}
        )

    def set_active_panel(self, panel: ActivePanel) -> None:
        self.editor_state = self.editor_state.model_copy(update={"active_panel": panel})

    def _forget_missing_blocks(self) -> None:
        state = self.editor_state
        updates: dict[str, Any] = {}
        if state.selected_block_id and state.selected_block_id not in self.newsletter.blocks:
            updates["selected_block_id"] = None
        if state.editing_block_id and state.editing_block_id not in self.newsletter.blocks:
            updates["editing_block_id"] = None
        if updates:
            self.editor_state = state.model_copy(update=updates)

    # --- Document lifecycle ---

    def new_newsletter(self) -> Newsletter:
        """Start over from the starter issue and open the editor."""
        return self.load_newsletter(create_default_newsletter())

    def load_newsletter(self, newsletter: Newsletter) -> Newsletter:
        """Replace the document wholesale and open the editor."""
        self.newsletter = newsletter
        self.editor_state = EditorState(active_panel=self.editor_state.active_panel)
        self.is_active = True
        logger.info("Loaded newsletter %s (version %d)", newsletter.meta.id, newsletter.meta.version)
        return self.newsletter

    def import_newsletter(self, newsletter: Newsletter) -> Newsletter:
        """Open an imported document and autosave it so a reload keeps it."""
        self.load_newsletter(newsletter)
        self.autosave()
        return self.newsletter

    def close(self) -> None:
        """Leave the editor; autosave stops firing until a document is opened again."""
        self.is_active = False
        self.clear_selection()

    # --- Mutations ---

    def update_block(self, block_id: str, fields: Mapping[str, Any]) -> Newsletter:
        self.newsletter = mutations.update_block(self.newsletter, block_id, fields)
        return self.newsletter

    def add_block(
        self,
        block_type: BlockType,
        anchor_block_id: str | None = None,
        layout: RowLayout = "1col",
    ) -> str:
        """Insert a block and select it.

        Returns:
            Id of the new block.
        """
        self.newsletter, block_id = mutations.add_block(
            self.newsletter, block_type, anchor_block_id, layout
        )
        self.select_block(block_id)
        return block_id

    def remove_block(self, block_id: str) -> Newsletter:
        self.newsletter = mutations.remove_block(self.newsletter, block_id)
        self._forget_missing_blocks()
        return self.newsletter

    def move_row_up(self, row_index: int) -> Newsletter:
        self.newsletter = mutations.move_row_up(self.newsletter, row_index)
        return self.newsletter

    def move_row_down(self, row_index: int) -> Newsletter:
        self.newsletter = mutations.move_row_down(self.newsletter, row_index)
        return self.newsletter

    def update_row_layout(self, row_id: str, layout: RowLayout) -> Newsletter:
        self.newsletter = mutations.update_row_layout(self.newsletter, row_id, layout)
        return self.newsletter

    def update_theme(self, preset_or_fields: ThemePreset | Mapping[str, Any]) -> Newsletter:
        self.newsletter = mutations.update_theme(self.newsletter, preset_or_fields)
        return self.newsletter

    def update_meta(self, fields: Mapping[str, Any]) -> Newsletter:
        self.newsletter = mutations.update_meta(self.newsletter, fields)
        return self.newsletter

    def add_article(self, block_id: str) -> Newsletter:
        self.newsletter = mutations.add_article(self.newsletter, block_id)
        return self.newsletter

    def update_article(self, block_id: str, article_id: str, fields: Mapping[str, Any]) -> Newsletter:
        self.newsletter = mutations.update_article(self.newsletter, block_id, article_id, fields)
        return self.newsletter

    def remove_article(self, block_id: str, article_id: str) -> Newsletter:
        self.newsletter = mutations.remove_article(self.newsletter, block_id, article_id)
        return self.newsletter

    def add_comment(
        self, block_id: str, article_id: str, author: str, role: str, text: str
    ) -> Newsletter:
        self.newsletter = mutations.add_comment(
            self.newsletter, block_id, article_id, author, role, text
        )
        return self.newsletter

    def remove_comment(self, block_id: str, article_id: str, comment_id: str) -> Newsletter:
        self.newsletter = mutations.remove_comment(self.newsletter, block_id, article_id, comment_id)
        return self.newsletter

    # --- Persistence ---

    def autosave(self) -> bool:
        """Write the current document to the autosave slot."""
        saved = self.storage.autosave(self.newsletter)
        if saved:
            self.last_saved_at = utc_now()
        return saved

    def save_version(self, label: str | None = None) -> SaveVersion:
        """Snapshot the document as a version, then autosave it."""
        version = self.storage.save_version(self.newsletter, label)
        self.autosave()
        return version

    def restore_version(self, version_id: str) -> bool:
        """Load a saved version's document; unknown ids leave the session alone."""
        version = self.storage.get_version(version_id)
        if version is None:
            return False
        self.load_newsletter(version.newsletter)
        return True

    def restore_autosave(self) -> bool:
        """Load the autosaved document, or start a new one if none is stored.

        Returns:
            True if an autosave was restored, False if a new document was created.
        """
        saved = self.storage.load_autosave()
        if saved is None:
            logger.info("No autosave found, creating a new newsletter")
            self.new_newsletter()
            return False
        self.load_newsletter(saved)
        return True
