"""Preset themes and the CSS custom properties derived from a theme."""

from __future__ import annotations

from backend.schemas.newsletter import Theme, ThemePreset

_BODY_FONT = "'IBM Plex Sans', sans-serif"
_SERIF_HEADING_FONT = "'Playfair Display', serif"

THEMES: dict[ThemePreset, Theme] = {
    "northwell": Theme(
        preset="northwell",
        primary_color="#003087",
        accent_color="#00A3E0",
        background_color="#F5F7FA",
        surface_color="#FFFFFF",
        text_color="#1A1A2E",
        muted_color="#6B7280",
        font_family=_BODY_FONT,
        heading_family=_SERIF_HEADING_FONT,
    ),
    "dark": Theme(
        preset="dark",
        primary_color="#00A3E0",
        accent_color="#38BDF8",
        background_color="#0F172A",
        surface_color="#1E293B",
        text_color="#E2E8F0",
        muted_color="#94A3B8",
        font_family=_BODY_FONT,
        heading_family=_SERIF_HEADING_FONT,
    ),
    "minimal": Theme(
        preset="minimal",
        primary_color="#18181B",
        accent_color="#52525B",
        background_color="#FAFAFA",
        surface_color="#FFFFFF",
        text_color="#09090B",
        muted_color="#A1A1AA",
        font_family=_BODY_FONT,
        heading_family=_BODY_FONT,
    ),
    "highcontrast": Theme(
        preset="highcontrast",
        primary_color="#000000",
        accent_color="#FFDD00",
        background_color="#FFFFFF",
        surface_color="#F0F0F0",
        text_color="#000000",
        muted_color="#333333",
        font_family=_BODY_FONT,
        heading_family=_SERIF_HEADING_FONT,
    ),
}

THEME_LABELS: dict[ThemePreset, str] = {
    "northwell": "Northwell Blue",
    "dark": "Dark Mode",
    "minimal": "Minimal",
    "highcontrast": "High Contrast",
}

DEFAULT_PRESET: ThemePreset = "northwell"


def theme_css_variables(theme: Theme) -> str:
    """Render the ``:root`` custom-property block for a theme.

    Args:
        theme: Theme attached to the document being exported.

    Returns:
        CSS text defining the colour, font, radius, and shadow variables
        the block stylesheets reference.
    """
    properties = {
        "--color-primary": theme.primary_color,
        "--color-accent": theme.accent_color,
        "--color-bg": theme.background_color,
        "--color-surface": theme.surface_color,
        "--color-text": theme.text_color,
        "--color-muted": theme.muted_color,
        "--font-body": theme.font_family,
        "--font-heading": theme.heading_family,
        "--font-mono": "'IBM Plex Mono', monospace",
        "--radius-sm": "4px",
        "--radius-md": "8px",
        "--radius-lg": "16px",
        "--shadow-sm": "0 1px 3px rgba(0,0,0,0.08)",
        "--shadow-md": "0 4px 12px rgba(0,0,0,0.12)",
        "--shadow-lg": "0 8px 32px rgba(0,0,0,0.16)",
    }
    lines = [f"  {name}: {value};" for name, value in properties.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"
