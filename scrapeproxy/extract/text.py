from __future__ import annotations

from typing import Optional, Tuple

from ..models import ExtractionFound, ExtractionNotFound, ExtractionResult
from ..utils.html import parse_html, text_of

FUZZY_PROBE_CHARS = 40
FULL_TEXT_LIMIT = 5000

# Page chrome dropped before reading text, both here and inside the browser.
NON_CONTENT_TAGS = ("nav", "footer", "header", "aside", "script", "style", "iframe", "noscript")
CONTENT_LANDMARKS = "//article | //main | //*[@role='main']"


def parse_page(html: str | bytes | None) -> Tuple[str, str]:
    """Return (title, body text) of an HTML document with page chrome removed.

    Body text comes from the first article/main landmark, or the whole body
    when there is none.
    """
    tree = parse_html(html)
    if tree is None:
        return "", ""

    for el in tree.xpath(" | ".join(f"//{tag}" for tag in NON_CONTENT_TAGS)):
        if el.getparent() is not None:
            el.drop_tree()

    title_el = tree.find(".//title")
    title = text_of(title_el).strip()

    landmarks = tree.xpath(CONTENT_LANDMARKS)
    body = text_of(landmarks[0]) if landmarks else ""
    if not body:
        body = text_of(tree.find("body"))
    return title, body.strip()


def _window(body: str, index: int, length: int, chars_before: int, chars_after: int) -> str:
    start = max(0, index - chars_before)
    end = min(len(body), index + length + chars_after)
    return body[start:end]


def extract_from_text(
    body: str,
    excerpt: str,
    chars_before: int,
    chars_after: int,
    title: str,
    url: str,
) -> Optional[ExtractionResult]:
    """
    Anchor `excerpt` in `body` and cut a context window around it.

    Tries the whole excerpt, then only its first 40 characters to ride out
    whitespace or formatting drift. The fuzzy window is measured from the
    40-character probe, not the full excerpt.

    Returns:
        ExtractionFound with the window, ExtractionNotFound carrying the first
        5000 characters of body when neither probe matches, or None for an
        empty body.
    """
    if not body:
        return None

    index = body.find(excerpt)
    if index != -1:
        return ExtractionFound(
            title=title,
            url=url,
            extracted_text=_window(body, index, len(excerpt), chars_before, chars_after),
        )

    probe = excerpt[:FUZZY_PROBE_CHARS]
    index = body.find(probe)
    if index == -1:
        return ExtractionNotFound(title=title, url=url, full_text=body[:FULL_TEXT_LIMIT])

    return ExtractionFound(
        title=title,
        url=url,
        extracted_text=_window(body, index, len(probe), chars_before, chars_after),
    )
