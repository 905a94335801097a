"""Parsing helpers for WordPress-style direct-download sites.

Persian DDL sites share one layout: a search listing of post cards that
link to a detail page, and a detail page full of direct ``.mkv``/``.mp4``
links labelled with their resolution.
"""

from __future__ import annotations

import re

from reelscout.domain.entities.catalog import Link, RawRecord
from reelscout.infrastructure.common.converters import extract_year
from reelscout.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from reelscout.infrastructure.common.release_parser import quality_from_text

UNKNOWN_QUALITY = "نامشخص"

_YEAR_RE = re.compile(r"\(?(?:19|20)\d{2}\)?")
_MARKETING_RE = re.compile(r"دانلود فیلم|دانلود سریال|دوبله فارسی|با زیرنویس")
_DIRECT_HINTS: tuple[str, ...] = (".mkv", ".mp4", "download")
_MAX_LABEL = 60


def clean_title(raw: str) -> str:
    """Drop years and marketing phrases (``"دانلود فیلم Inception 2010"``)."""
    text = _MARKETING_RE.sub("", _YEAR_RE.sub("", raw))
    return " ".join(text.split())


def parse_listing(
    html: str,
    *,
    source: str,
    item_selectors: tuple[str, ...],
    link_selectors: tuple[str, ...],
    title_selectors: tuple[str, ...],
    limit: int,
) -> list[RawRecord]:
    """Search-result cards → link-less records with ``detail_url`` and poster."""
    soup = parse_html(html)
    records: list[RawRecord] = []
    for card in select_items(soup, ",".join(item_selectors)):
        if len(records) >= limit:
            break
        detail_url = extract_attr(card, link_selectors[0], "href", *link_selectors[1:])
        raw_title = extract_attr(card, link_selectors[0], "title", *link_selectors[1:])
        if not raw_title:
            raw_title = extract_text(card, title_selectors[0], *title_selectors[1:])
        if not raw_title or not detail_url:
            continue

        title = clean_title(raw_title)
        if not title:
            continue

        poster = (
            extract_attr(card, "img", "src")
            or extract_attr(card, "img", "data-src")
            or extract_attr(card, "img", "data-lazy-src")
        )
        records.append(
            RawRecord(
                title=title,
                source=source,
                year=extract_year(raw_title),
                poster=poster or None,
                detail_url=detail_url,
                metadata={"raw_title": raw_title},
            )
        )
    return records


def _accept(href: str) -> bool:
    return href.startswith("http") and "javascript" not in href and "#" not in href


def parse_download_links(
    html: str,
    *,
    source: str,
    selectors: tuple[str, ...],
    include_tables: bool = False,
) -> list[Link]:
    """Direct download links on a detail page, deduplicated by URL."""
    soup = parse_html(html)
    links: list[Link] = []
    seen: set[str] = set()

    def _add(href: str, text: str) -> None:
        if href in seen:
            return
        seen.add(href)
        links.append(
            Link(
                quality=quality_from_text(text, default=UNKNOWN_QUALITY),
                address=href,
                source=source,
                label=text[:_MAX_LABEL].strip(),
                is_direct=True,
            )
        )

    for anchor in soup.select(",".join(selectors)):
        href = str(anchor.get("href") or "")
        if _accept(href):
            _add(href, anchor.get_text(" ", strip=True))

    if include_tables:
        for anchor in soup.select('table a[href*="http"]'):
            href = str(anchor.get("href") or "")
            if not _accept(href) or not any(h in href for h in _DIRECT_HINTS):
                continue
            row = anchor.find_parent("tr")
            text = row.get_text(" ", strip=True) if row else anchor.get_text(strip=True)
            _add(href, text)

    return links
