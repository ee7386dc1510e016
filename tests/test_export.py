"""HTML and print export projection tests."""

from backend.config import Settings
from backend.schemas.newsletter import Newsletter
from backend.services.export import (
    build_export_html,
    build_print_html,
    html_export_filename,
    strip_editor_chrome,
)

PREVIEW_MARKUP = """\
<div class="newsletter-preview">
  <div class="row-controls"><button>Up</button><button>Down</button></div>
  <div class="block-wrapper selected" style="padding: 4px;" data-block-id="b1">
    <div class="block-controls"><button>Delete</button></div>
    <h1 contenteditable="true">Pulse &amp; News</h1>
    <img src="logo.png" alt="logo">
    <button class="upload-btn">Upload</button>
    <p contenteditable>Body&nbsp;text &#169; 2026</p>
    <span data-editor-only>Only while editing</span>
    <button class="add-article-btn">Add article</button>
    <div class="comments">
      <p>Looks good</p>
      <button class="comment-delete">x</button>
      <form class="comment-add"><input name="text"></form>
    </div>
  </div>
</div>
"""


def test_strip_removes_editor_only_elements_with_their_content() -> None:
    cleaned = strip_editor_chrome(PREVIEW_MARKUP)

    for removed in (
        "row-controls",
        "block-controls",
        "upload-btn",
        "add-article-btn",
        "comment-add",
        "comment-delete",
        "Only while editing",
        "Delete",
        "<input",
    ):
        assert removed not in cleaned
    assert "Looks good" in cleaned


def test_strip_removes_contenteditable_and_keeps_entities() -> None:
    cleaned = strip_editor_chrome(PREVIEW_MARKUP)

    assert "contenteditable" not in cleaned
    assert "<h1>Pulse &amp; News</h1>" in cleaned
    assert "Body&nbsp;text &#169; 2026" in cleaned
    assert '<img src="logo.png" alt="logo">' in cleaned


def test_strip_disables_block_wrapper_outline() -> None:
    cleaned = strip_editor_chrome(PREVIEW_MARKUP)

    assert 'style="padding: 4px; outline: none"' in cleaned
    assert strip_editor_chrome('<div class="block-wrapper"></div>') == (
        '<div class="block-wrapper" style="outline: none"></div>'
    )


def test_strip_recovers_after_unclosed_element_inside_editor_chrome() -> None:
    cleaned = strip_editor_chrome('<div class="row-controls"><p>Move</div><h1>Kept</h1>')

    assert cleaned == "<h1>Kept</h1>"


def test_strip_skips_nested_elements_of_the_same_tag() -> None:
    markup = '<div data-editor-only><div><span>x</span></div></div><p>After</p>'

    assert strip_editor_chrome(markup) == "<p>After</p>"


def test_strip_leaves_plain_markup_unchanged() -> None:
    markup = '<section class="block-text"><p>Hello <strong>world</strong></p><br></section>'

    assert strip_editor_chrome(markup) == markup


def test_export_html_is_standalone_page(newsletter: Newsletter) -> None:
    page = build_export_html(newsletter, PREVIEW_MARKUP, ".block-text { color: red; }")

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>The Neurology AI Pulse — Issue 001</title>" in page
    assert "--color-primary: #003087;" in page
    assert ".block-text { color: red; }" in page
    assert "Pulse &amp; News" in page
    assert "contenteditable" not in page
    assert "window.print" not in page


def test_export_title_is_escaped(newsletter: Newsletter) -> None:
    meta = newsletter.meta.model_copy(update={"title": "<Pulse>"})

    page = build_export_html(newsletter.model_copy(update={"meta": meta}), "<p>x</p>")

    assert "<title>&lt;Pulse&gt; — Issue 001</title>" in page


def test_print_page_waits_for_assets_before_printing(newsletter: Newsletter) -> None:
    settings = Settings(export={"asset_timeout_ms": 4321})

    page = build_print_html(newsletter, PREVIEW_MARKUP, settings=settings)

    assert "@page { size: A4; margin: 12mm 14mm; }" in page
    assert "document.fonts.ready" in page
    assert 'addEventListener("error"' in page
    assert "setTimeout(printOnce, 4321)" in page
    assert "window.print()" in page


def test_export_does_not_modify_document(newsletter: Newsletter) -> None:
    before = newsletter.model_copy(deep=True)

    build_export_html(newsletter, PREVIEW_MARKUP)
    build_print_html(newsletter, PREVIEW_MARKUP, settings=Settings())

    assert newsletter == before


def test_html_export_filename(newsletter: Newsletter) -> None:
    settings = Settings(export={"filename_prefix": "pulse"})

    assert html_export_filename(newsletter.meta, settings) == "pulse-issue-001.html"
