"""Tests for excerpt anchoring and page text extraction."""

from scrapeproxy.extract.text import FULL_TEXT_LIMIT, extract_from_text, parse_page
from scrapeproxy.models import ExtractionFound, ExtractionNotFound

from .conftest import html_page


def test_exact_match_window():
    body = "...lorem ipsum the quick brown fox jumps over..."
    excerpt = "the quick brown fox"
    result = extract_from_text(body, excerpt, 5, 5, "T", "https://example.com")

    assert isinstance(result, ExtractionFound)
    i = body.index(excerpt)
    assert result.extracted_text == body[i - 5 : i + len(excerpt) + 5]
    assert len(result.extracted_text) == 5 + len(excerpt) + 5
    assert result.title == "T"
    assert result.url == "https://example.com"


def test_window_is_clamped_to_text_bounds():
    body = "start of text and then the end"
    result = extract_from_text(body, "start", 100, 3, "", "u")
    assert result.extracted_text == "start of"

    result = extract_from_text(body, "the end", 4, 100, "", "u")
    assert result.extracted_text == "hen the end"


def test_fuzzy_match_uses_probe_length():
    probe = "a" * 10 + "The forty character prefix of an excerpt"
    probe = probe[:40]
    body = "x" * 50 + probe + " but then the page diverges completely" + "y" * 50
    excerpt = probe + " with a tail that is nowhere on the page"

    result = extract_from_text(body, excerpt, 10, 20, "", "u")

    assert isinstance(result, ExtractionFound)
    j = body.index(probe)
    assert result.extracted_text == body[j - 10 : j + 40 + 20]


def test_not_found_truncates_full_text():
    body = "z" * (FULL_TEXT_LIMIT + 1234)
    result = extract_from_text(body, "absent excerpt", 10, 10, "Title", "u")

    assert isinstance(result, ExtractionNotFound)
    assert result.found is False
    assert len(result.full_text) == FULL_TEXT_LIMIT
    assert result.title == "Title"


def test_empty_body_returns_none():
    assert extract_from_text("", "anything", 1, 1, "", "u") is None


def test_wire_names_are_camel_case():
    found = extract_from_text("abc", "b", 0, 0, "t", "u").model_dump(by_alias=True)
    assert found == {"found": True, "title": "t", "url": "u", "extractedText": "b"}

    missing = extract_from_text("abc", "q", 0, 0, "t", "u").model_dump(by_alias=True)
    assert missing == {"found": False, "title": "t", "url": "u", "fullText": "abc"}


def test_parse_page_strips_chrome_and_prefers_article():
    html = html_page(
        "<header>Site header</header>"
        "<nav>Menu</nav>"
        "<article><p>Real content here.</p><script>var x = 1;</script></article>"
        "<aside>Related</aside>"
        "<footer>Copyright</footer>",
        title="  My Title  ",
    )
    title, body = parse_page(html)

    assert title == "My Title"
    assert body == "Real content here."


def test_parse_page_role_main_landmark():
    html = html_page('<div>outside</div><div role="main">inside the main region</div>')
    _, body = parse_page(html)
    assert body == "inside the main region"


def test_parse_page_falls_back_to_body():
    html = html_page("<div>Plain page text</div><style>.a{}</style><noscript>enable js</noscript>")
    _, body = parse_page(html)
    assert body == "Plain page text"


def test_parse_page_keeps_text_after_removed_elements():
    html = html_page("<div>before<nav>menu</nav> after</div>")
    _, body = parse_page(html)
    assert body == "before after"


def test_parse_page_handles_empty_documents():
    assert parse_page("") == ("", "")
    assert parse_page("   ") == ("", "")


def test_parse_page_accepts_xml_declaration():
    html = '<?xml version="1.0" encoding="utf-8"?>' + html_page("<main>declared</main>")
    _, body = parse_page(html)
    assert body == "declared"
