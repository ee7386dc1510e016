"""Pydantic schemas for the newsletter document and the editor API."""

from backend.schemas.blocks import (
    ArticleComment,
    ArticleItem,
    Block,
    BlockType,
    Contributor,
    SbarStep,
    SocialLink,
)
from backend.schemas.newsletter import (
    EditorState,
    Newsletter,
    NewsletterMeta,
    Row,
    RowLayout,
    SaveVersion,
    Theme,
    ThemePreset,
)

__all__ = [
    "ArticleComment",
    "ArticleItem",
    "Block",
    "BlockType",
    "Contributor",
    "EditorState",
    "Newsletter",
    "NewsletterMeta",
    "Row",
    "RowLayout",
    "SaveVersion",
    "SbarStep",
    "SocialLink",
    "Theme",
    "ThemePreset",
]
