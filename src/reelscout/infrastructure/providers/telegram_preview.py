"""Parser for public Telegram channel previews (``t.me/s/<channel>``).

Channel posts advertise bot deep links (``https://t.me/SomeBot?start=...``)
that hand out the file inside Telegram. Each post with at least one such
link becomes a RawRecord whose links are flagged ``is_bot_link``.
"""

from __future__ import annotations

import re

from bs4 import Tag

from reelscout.domain.entities.catalog import (
    BOT_LINK_QUALITY,
    UNKNOWN_SIZE,
    Link,
    RawRecord,
)
from reelscout.infrastructure.common.html_selectors import (
    extract_attr,
    parse_html,
    select_items,
)

PREVIEW_BASE = "https://t.me/s"

# Shorteners and archive bots that no longer deliver files.
BANNED_LINK_PATTERNS: tuple[str, ...] = (
    "archivefilmehbot",
    "filmeharchive_bot",
    "archive_filmehbot",
    "2ad.ir",
    "yun.ir",
    "opizo.com",
    "opizo.me",
    "zi.link",
    "uprocket.ir",
)

_DUB_MARKERS: tuple[str, ...] = ("دوبله", "dubbed", "فارسی")
_HARDSUB_MARKERS: tuple[str, ...] = ("زیرنویس چسبیده", "hardsub", "زیرنویس")

_TITLE_PREFIX_RE = re.compile(r"^[🎬🎥📽️🔥⭐️🌟💯✨]+\s*")
_YEAR_RE = re.compile(r"\(?((?:19|20)\d{2})\)?")
_IMDB_RE = re.compile(r"start=(tt\d+)")
_POSTER_RE = re.compile(r"url\(['\"]?(.*?)['\"]?\)")

_MAX_TITLE_LEN = 100
_BOT_LINK_LABEL = "🚀 شروع دانلود در ربات"


def is_bot_link(href: str) -> bool:
    """True for bot deep links that still deliver files."""
    lowered = href.lower()
    if any(p in lowered for p in BANNED_LINK_PATTERNS) and "streamwide" not in lowered:
        return False
    if "?start=" in href:
        return True
    return "t.me/" in href and "filmehbot" in lowered and "archive" not in lowered


def _clean_title(first_line: str) -> str:
    title = _TITLE_PREFIX_RE.sub("", first_line.strip())
    title = _YEAR_RE.sub("", title)
    return " ".join(title.split())[:_MAX_TITLE_LEN]


def _label(dubbed: bool, hardsub: bool) -> str:
    label = _BOT_LINK_LABEL
    if dubbed:
        label = f"🎙️ دوبله فارسی - {label}"
    if hardsub:
        label = f"📝 زیرنویس - {label}"
    return label


def _message_text(message: Tag) -> str:
    """Post text with <br> kept as line breaks and inline markup flattened."""
    node = message.select_one(".tgme_widget_message_text")
    if node is None:
        return ""
    for br in node.find_all("br"):
        br.replace_with("\n")
    lines = (line.strip() for line in node.get_text().split("\n"))
    return "\n".join(line for line in lines if line)


def parse_message(message: Tag, channel: str, source: str) -> RawRecord | None:
    """Turn one ``.tgme_widget_message`` into a RawRecord (None = no bot links)."""
    text = _message_text(message)
    if not text:
        return None

    hrefs: list[str] = []
    for anchor in message.select("a[href]"):
        href = str(anchor.get("href") or "")
        if href and is_bot_link(href) and href not in hrefs:
            hrefs.append(href)
    if not hrefs:
        return None

    lowered = text.lower()
    dubbed = any(m in lowered for m in _DUB_MARKERS)
    hardsub = any(m in lowered for m in _HARDSUB_MARKERS)
    label = _label(dubbed, hardsub)

    year_match = _YEAR_RE.search(text)
    imdb_id: str | None = None
    for href in hrefs:
        imdb_match = _IMDB_RE.search(href)
        if imdb_match:
            imdb_id = imdb_match.group(1)
            break

    genres = [
        tag.get_text(strip=True).lstrip("#")
        for tag in message.select('a[href*="?q=%23"]')
        if tag.get_text(strip=True).startswith("#")
    ]

    style = extract_attr(message, ".tgme_widget_message_photo_wrap", "style")
    poster_match = _POSTER_RE.search(style) if style else None

    title = _clean_title(text.split("\n", 1)[0])
    if not title:
        return None

    return RawRecord(
        title=title,
        source=source,
        year=int(year_match.group(1)) if year_match else None,
        genres=genres,
        poster=poster_match.group(1) if poster_match else None,
        imdb_id=imdb_id,
        links=[
            Link(
                quality=BOT_LINK_QUALITY,
                address=href,
                size=UNKNOWN_SIZE,
                seeds=0,
                source=channel,
                label=label,
                is_bot_link=True,
            )
            for href in hrefs
        ],
        metadata={
            "channel": channel,
            "message_link": extract_attr(message, ".tgme_widget_message_date", "href"),
            "dubbed": dubbed,
            "hardsub": hardsub,
        },
    )


def parse_channel_page(html: str, channel: str, source: str) -> list[RawRecord]:
    """Parse every message on a channel preview page."""
    soup = parse_html(html)
    records: list[RawRecord] = []
    for message in select_items(soup, ".tgme_widget_message"):
        record = parse_message(message, channel, source)
        if record is not None:
            records.append(record)
    return records
