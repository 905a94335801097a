"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import extract_year, normalize_size, to_int, to_rating, to_seeds
from .release_parser import parse_release, quality_from_text

__all__ = [
    "extract_year",
    "normalize_size",
    "parse_release",
    "quality_from_text",
    "to_int",
    "to_rating",
    "to_seeds",
]
