"""Placeholder "search on site X" links for titles without real links."""

from __future__ import annotations

from urllib.parse import quote

from reelscout.domain.entities.catalog import Link

_SEARCH_SITES: tuple[tuple[str, str], ...] = (
    ("🔍 1337x", "https://1337x.to/search/{term}/1/"),
    ("🔍 YTS", "https://yts.mx/browse-movies/{term}"),
)


def search_links(title: str, year: int | None, source: str = "") -> list[Link]:
    """One placeholder link per search site. Flagged ``is_search_link``."""
    term = quote(f"{title} {year}" if year else title, safe="")
    return [
        Link(
            quality=label,
            address=template.format(term=term),
            size="Click to search",
            source=source,
            is_search_link=True,
        )
        for label, template in _SEARCH_SITES
    ]
