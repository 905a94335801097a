"""Merge provider RawRecords into canonical Titles.

Pure transformation logic, no I/O. Records sharing an identity key
(``lowercase(title)|year``) collapse into one Title; their links are
unioned and deduplicated by signature, and empty scalar fields are
filled from later records without overwriting earlier values.
"""

from __future__ import annotations

import structlog

from reelscout.domain.entities.catalog import Link, RawRecord, Title, identity_key

log = structlog.get_logger(__name__)

_FILLABLE_FIELDS: tuple[str, ...] = (
    "rating",
    "poster",
    "synopsis",
    "original_title",
    "imdb_id",
    "genres",
)


def _is_empty(value: object) -> bool:
    return value is None or value == "" or value == []


def _valid_rating(rating: float | None) -> float | None:
    if rating is None or rating < 0 or rating > 10:
        return None
    return rating


def _append_unique(
    target: list[Link], seen: set[tuple[str, str, str]], links: list[Link]
) -> int:
    added = 0
    for link in links:
        sig = link.signature
        if sig in seen:
            continue
        seen.add(sig)
        target.append(link)
        added += 1
    return added


def _new_title(record: RawRecord, display_title: str) -> Title:
    return Title(
        title=display_title,
        year=record.year,
        rating=_valid_rating(record.rating),
        original_title=record.original_title or None,
        poster=record.poster or None,
        synopsis=record.synopsis or None,
        genres=list(record.genres),
        imdb_id=record.imdb_id or None,
        providers=[record.source],
    )


def _fill_empty(title: Title, record: RawRecord) -> None:
    for name in _FILLABLE_FIELDS:
        if not _is_empty(getattr(title, name)):
            continue
        incoming = getattr(record, name)
        if name == "rating":
            incoming = _valid_rating(incoming)
        if _is_empty(incoming):
            continue
        setattr(title, name, list(incoming) if name == "genres" else incoming)


def merge_records(records: list[RawRecord]) -> list[Title]:
    """Merge *records* (in arrival order) into Titles (in first-seen order).

    Records with a blank title are discarded. The output is deterministic
    for a given input order.
    """
    titles: dict[str, Title] = {}
    signatures: dict[str, set[tuple[str, str, str]]] = {}
    discarded = 0

    for record in records:
        display_title = " ".join((record.title or "").split())
        if not display_title:
            discarded += 1
            continue

        key = identity_key(display_title, record.year)
        title = titles.get(key)
        if title is None:
            title = _new_title(record, display_title)
            titles[key] = title
            signatures[key] = set()
        else:
            _fill_empty(title, record)
            if record.source not in title.providers:
                title.providers.append(record.source)

        _append_unique(title.links, signatures[key], record.links)

    log.debug(
        "records_merged",
        records=len(records),
        titles=len(titles),
        discarded=discarded,
    )
    return list(titles.values())

