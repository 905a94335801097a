"""Title and link ranking.

Titles: descending rating (missing rating counts as 0).
Links: Telegram bot links first, then descending seeds.

Python's ``sorted`` is stable, so equal keys keep their merge order and
identical input always yields identical output.
"""

from __future__ import annotations

from dataclasses import replace

from reelscout.domain.entities.catalog import Link, Title


class TitleRanker:
    """Orders titles and their links. Returns new lists, never mutates input."""

    @staticmethod
    def title_key(title: Title) -> float:
        return -(title.rating or 0.0)

    @staticmethod
    def link_key(link: Link) -> tuple[bool, int]:
        return (not link.is_bot_link, -link.seeds)

    def sort_links(self, links: list[Link]) -> list[Link]:
        return sorted(links, key=self.link_key)

    def sort(self, titles: list[Title]) -> list[Title]:
        """Sort titles by rating and each title's links by the link rule."""
        ranked = [replace(t, links=self.sort_links(t.links)) for t in titles]
        return sorted(ranked, key=self.title_key)
