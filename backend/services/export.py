"""One-way HTML and print projections of a newsletter.

The browser posts the rendered preview markup together with the style
rules it collected from the page. This module strips editor-only
affordances from that markup and wraps it in a standalone document. The
newsletter model is only read, never changed.
"""

from __future__ import annotations

import html
import logging
from html.parser import HTMLParser
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from backend.config import Settings, get_settings
from backend.schemas.newsletter import Newsletter, NewsletterMeta
from backend.services.themes import theme_css_variables

logger = logging.getLogger(__name__)

EXPORT_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"

EDITOR_ONLY_CLASSES = frozenset(
    {
        "block-controls",
        "row-controls",
        "upload-btn",
        "add-article-btn",
        "comment-add",
        "comment-delete",
    }
)
EDITOR_ONLY_ATTRIBUTE = "data-editor-only"

_VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

_BASE_EXPORT_CSS = """\
.block-controls,
.row-controls,
[data-editor-only],
.upload-btn,
.add-article-btn,
.comment-add,
.comment-delete { display: none !important; }
* { box-sizing: border-box; }
body {
  margin: 0;
  background: var(--color-bg);
  color: var(--color-text);
  font-family: var(--font-body);
  -webkit-font-smoothing: antialiased;
}
.newsletter-preview { max-width: 860px; margin: 0 auto; }
a { color: var(--color-accent); }
@keyframes ticker-scroll {
  0% { transform: translateX(0); }
  100% { transform: translateX(-50%); }
}"""

_PRINT_CSS = """\
@page { size: A4; margin: 12mm 14mm; }
@media print {
  html, body {
    width: 210mm;
    print-color-adjust: exact;
    -webkit-print-color-adjust: exact;
  }
  .newsletter-preview { max-width: 100%; box-shadow: none !important; }
  .block-ticker { overflow: hidden; }
  .ticker-inner { animation: none !important; }
  a { color: inherit; text-decoration: none; }
}"""

_environment = Environment(loader=FileSystemLoader(str(EXPORT_TEMPLATES)), autoescape=True)


class _EditorChromeStripper(HTMLParser):
    """Re-emits markup without editor-only elements or contenteditable attributes."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._parts: list[str] = []
        self._skip_tag: str | None = None
        self._skip_depth = 0

    @property
    def result(self) -> str:
        return "".join(self._parts)

    @staticmethod
    def _is_editor_only(attrs: list[tuple[str, str | None]]) -> bool:
        for name, value in attrs:
            if name == EDITOR_ONLY_ATTRIBUTE:
                return True
            if name == "class" and value and EDITOR_ONLY_CLASSES.intersection(value.split()):
                return True
        return False

    @staticmethod
    def _clean_attrs(attrs: list[tuple[str, str | None]]) -> list[tuple[str, str | None]]:
        cleaned = [(name, value) for name, value in attrs if name != "contenteditable"]
        classes = next((value or "" for name, value in cleaned if name == "class"), "")
        if "block-wrapper" not in classes.split():
            return cleaned

        style = next((value or "" for name, value in cleaned if name == "style"), "")
        style = f"{style.rstrip().rstrip(';')}; outline: none" if style.strip() else "outline: none"
        return [(name, value) for name, value in cleaned if name != "style"] + [("style", style)]

    @staticmethod
    def _render_tag(tag: str, attrs: list[tuple[str, str | None]], self_closing: bool) -> str:
        rendered = "".join(
            f" {name}" if value is None else f' {name}="{html.escape(value, quote=True)}"'
            for name, value in attrs
        )
        return f"<{tag}{rendered}{' /' if self_closing else ''}>"

    def _open(self, tag: str, attrs: list[tuple[str, str | None]], self_closing: bool) -> None:
        is_void = self_closing or tag in _VOID_ELEMENTS
        if self._skip_tag is not None:
            # Only same-name tags can close the skipped element.
            if tag == self._skip_tag and not is_void:
                self._skip_depth += 1
            return
        if self._is_editor_only(attrs):
            if not is_void:
                self._skip_tag = tag
                self._skip_depth = 1
            return
        self._parts.append(self._render_tag(tag, self._clean_attrs(attrs), self_closing))

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        if tag in _VOID_ELEMENTS:
            return
        if self._skip_tag is not None:
            if tag == self._skip_tag:
                self._skip_depth -= 1
                if not self._skip_depth:
                    self._skip_tag = None
            return
        self._parts.append(f"</{tag}>")

    def _emit(self, text: str) -> None:
        if self._skip_tag is None:
            self._parts.append(text)

    def handle_data(self, data: str) -> None:
        self._emit(data)

    def handle_entityref(self, name: str) -> None:
        self._emit(f"&{name};")

    def handle_charref(self, name: str) -> None:
        self._emit(f"&#{name};")

    def handle_comment(self, data: str) -> None:
        self._emit(f"<!--{data}-->")

    def handle_decl(self, decl: str) -> None:
        self._emit(f"<!{decl}>")


def strip_editor_chrome(markup: str) -> str:
    """Remove editing affordances from rendered preview markup.

    Drops elements carrying an editor-only class or the
    ``data-editor-only`` attribute (with everything inside them), removes
    ``contenteditable`` attributes, and turns off the selection outline on
    block wrappers.
    """
    stripper = _EditorChromeStripper()
    stripper.feed(markup)
    stripper.close()
    return stripper.result


def _collect_styles(newsletter: Newsletter, collected_styles: str) -> str:
    parts = [theme_css_variables(newsletter.theme), _BASE_EXPORT_CSS]
    if collected_styles.strip():
        parts.append(collected_styles)
    return "\n".join(parts)


def build_export_html(newsletter: Newsletter, markup: str, collected_styles: str = "") -> str:
    """Build a standalone HTML document for the newsletter.

    Args:
        newsletter: Document being exported; supplies title and theme.
        markup: Rendered preview markup from the editor.
        collected_styles: CSS rules gathered from the editor page.

    Returns:
        Complete HTML page with all styles inlined in one ``<style>`` block.
    """
    template = _environment.get_template("export.html")
    return template.render(
        title=_document_title(newsletter.meta),
        styles=_collect_styles(newsletter, collected_styles),
        body=strip_editor_chrome(markup),
        print_mode=False,
    )


def build_print_html(
    newsletter: Newsletter,
    markup: str,
    collected_styles: str = "",
    settings: Settings | None = None,
) -> str:
    """Build the print page used for PDF export.

    The page prints itself once every image has fired ``load`` or
    ``error`` and the document fonts are ready, with
    ``export.asset_timeout_ms`` as an upper bound for assets that never
    settle.
    """
    if settings is None:
        settings = get_settings()

    template = _environment.get_template("export.html")
    return template.render(
        title=_document_title(newsletter.meta),
        styles=_collect_styles(newsletter, collected_styles) + "\n" + _PRINT_CSS,
        body=strip_editor_chrome(markup),
        print_mode=True,
        asset_timeout_ms=settings.export.asset_timeout_ms,
    )


def _document_title(meta: NewsletterMeta) -> str:
    return f"{meta.title} — Issue {meta.issue_number}"


def html_export_filename(meta: NewsletterMeta, settings: Settings | None = None) -> str:
    """Return the download filename for the HTML export."""
    if settings is None:
        settings = get_settings()
    return f"{settings.export.filename_prefix}-issue-{meta.issue_number}.html"
