"""Type conversion utilities for scraped values."""

from __future__ import annotations

import re

_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
_SIZE_RE = re.compile(r"([\d.,]+)\s*([KMGT])i?B", re.IGNORECASE)


def to_int(raw: str | int | None) -> int | None:
    """Convert string or int to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - "123" → 123
        - "1,234" → 1234
        - "" → None
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        txt = "".join(ch for ch in raw if ch.isdigit())
        return int(txt) if txt else None
    return None


def to_seeds(raw: str | int | None) -> int:
    """Seed count, never negative, 0 when unknown."""
    value = to_int(raw)
    return value if value is not None and value > 0 else 0


def to_rating(raw: str | float | int | None) -> float | None:
    """Parse a 0-10 rating. Out-of-range or unparsable values become None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value < 0 or value > 10:
        return None
    return value


def to_year(raw: str | int | None) -> int | None:
    """Extract a plausible release year (19xx/20xx) from *raw*."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw if 1900 <= raw <= 2099 else None
    m = _YEAR_RE.search(raw)
    return int(m.group(1)) if m else None


def extract_year(text: str) -> int | None:
    """Last 19xx/20xx token in *text* (release names put the year late)."""
    matches = _YEAR_RE.findall(text)
    return int(matches[-1]) if matches else None


def normalize_size(raw: str | None) -> str:
    """``"1.5 GiB"`` → ``"1.5 GB"``; unknown sizes become ``"N/A"``."""
    if not raw:
        return "N/A"
    m = _SIZE_RE.search(raw)
    if not m:
        stripped = raw.strip()
        return stripped or "N/A"
    number = m.group(1).replace(",", ".")
    return f"{number} {m.group(2).upper()}B"
