"""Grouping of scraped torrent-table rows into per-title records."""

from __future__ import annotations

from dataclasses import dataclass, replace

from reelscout.domain.entities.catalog import Link, RawRecord, normalize_title
from reelscout.infrastructure.common.release_parser import (
    parse_release,
    quality_rank,
)

MAX_LINKS_PER_TITLE = 4


@dataclass(frozen=True)
class TorrentRow:
    """One row of a tracker search table."""

    name: str
    magnet: str
    size: str
    seeds: int
    detail_url: str | None = None


def group_rows(
    rows: list[TorrentRow],
    source: str,
    *,
    default_quality: str = "720p",
    max_links: int = MAX_LINKS_PER_TITLE,
) -> list[RawRecord]:
    """Group release rows by guessed ``(title, year)``.

    Each group keeps its best *max_links* links (quality, then seeds).
    Groups come out in first-seen order.
    """
    groups: dict[tuple[str, int | None], RawRecord] = {}
    for row in rows:
        info = parse_release(row.name, default_quality=default_quality)
        link = Link(
            quality=info.quality,
            address=row.magnet,
            size=row.size,
            seeds=row.seeds,
            source=source,
            label=row.name,
        )
        key = (normalize_title(info.title), info.year)
        record = groups.get(key)
        if record is None:
            groups[key] = RawRecord(
                title=info.title,
                source=source,
                year=info.year,
                links=[link],
                detail_url=row.detail_url,
            )
        else:
            record.links.append(link)

    out: list[RawRecord] = []
    for record in groups.values():
        best = sorted(
            record.links,
            key=lambda link: (quality_rank(link.quality), link.seeds),
            reverse=True,
        )
        out.append(replace(record, links=best[:max_links]))
    return out
