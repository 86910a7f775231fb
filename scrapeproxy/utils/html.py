from __future__ import annotations

from typing import Optional, Union

from lxml import etree
from lxml import html as LH


def has_class(name: str) -> str:
    """XPath predicate matching elements whose class list contains `name`."""
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {name} ')"


def parse_html(markup: Union[str, bytes, None]) -> Optional[LH.HtmlElement]:
    """Parse a full HTML document; None when there is nothing to parse."""
    if not markup or not markup.strip():
        return None
    try:
        return LH.document_fromstring(markup)
    except ValueError:
        # lxml refuses str input carrying an XML encoding declaration
        if isinstance(markup, str):
            return parse_html(markup.encode("utf-8"))
        return None
    except etree.ParserError:
        return None


def text_of(el: Optional[LH.HtmlElement]) -> str:
    if el is None:
        return ""
    return el.text_content()
