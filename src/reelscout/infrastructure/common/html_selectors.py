"""CSS-selector-based HTML extraction with fallback chains.

Every extraction helper takes a primary selector plus optional
*fallback_selectors*; the first selector that yields a match wins.
Scraped sites change their markup often, so providers list the current
selector first and older layouts after it.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml parser)."""
    return BeautifulSoup(html, "lxml")


def parse_xml(xml: str) -> BeautifulSoup:
    """Parse an RSS/XML document (lxml-xml parser, namespaced tags kept)."""
    return BeautifulSoup(xml, "xml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS, returning matches of the first selector that hits."""
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Text of the first matching child element.

    With ``selector=""`` the element's own text is returned. Line breaks
    inside the element are kept as ``\\n``.
    """
    if selector == "":
        text = element.get_text("\n", strip=True)
        return text or default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text("\n", strip=True)
            if text:
                return text
    return default


def extract_attr(
    element: Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Attribute of the first matching child element (``""`` = element itself)."""
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default

