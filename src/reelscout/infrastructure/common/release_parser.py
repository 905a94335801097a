"""Release-name parsing via guessit (title, year, resolution)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from guessit import guessit

from .converters import extract_year

_RESOLUTIONS: tuple[str, ...] = ("2160p", "1080p", "720p", "480p")

_SCREEN_SIZE_TO_LABEL: dict[str, str] = {
    "2160p": "2160p",
    "4K": "2160p",
    "1080p": "1080p",
    "1080i": "1080p",
    "720p": "720p",
    "576p": "480p",
    "480p": "480p",
}

# Free-text hints found in link labels on direct-download sites.
_TEXT_HINTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"2160|\b4k\b|\buhd\b", re.IGNORECASE), "2160p"),
    (re.compile(r"1080|فول"), "1080p"),
    (re.compile(r"720"), "720p"),
    (re.compile(r"480"), "480p"),
)


@dataclass(frozen=True)
class ReleaseInfo:
    """Fields guessed from a scene-style release name."""

    title: str
    year: int | None
    quality: str


def quality_from_text(text: str, default: str = "Unknown") -> str:
    """Map a free-text label (``"Download 1080p x265"``) to a resolution label."""
    for pattern, label in _TEXT_HINTS:
        if pattern.search(text):
            return label
    return default


def parse_release(name: str, default_quality: str = "720p") -> ReleaseInfo:
    """Guess title, year and quality from a release name.

    ``"Inception.2010.1080p.BluRay.x264"`` → ``ReleaseInfo("Inception", 2010, "1080p")``.
    Falls back to the raw name when guessit finds no title.
    """
    info = guessit(name)

    title = str(info.get("title") or "").strip()
    if not title:
        title = name.replace(".", " ").strip()

    year = info.get("year")
    if not isinstance(year, int):
        year = extract_year(name)

    screen_size = info.get("screen_size")
    quality = _SCREEN_SIZE_TO_LABEL.get(str(screen_size), "") if screen_size else ""
    if not quality:
        quality = quality_from_text(name, default=default_quality)

    return ReleaseInfo(title=title, year=year, quality=quality)


def quality_rank(quality: str) -> int:
    """Higher is better; unknown labels rank lowest."""
    try:
        return len(_RESOLUTIONS) - _RESOLUTIONS.index(quality)
    except ValueError:
        return 0
