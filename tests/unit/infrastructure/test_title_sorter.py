"""Tests for TitleRanker."""

from __future__ import annotations

from reelscout.domain.entities.catalog import Link, Title
from reelscout.infrastructure.catalog.title_sorter import TitleRanker


def _link(seeds: int, *, bot: bool = False, address: str = "") -> Link:
    return Link(
        quality="1080p",
        address=address or f"magnet:{seeds}",
        seeds=seeds,
        is_bot_link=bot,
    )


class TestSortTitles:
    def test_descending_rating_missing_last(self) -> None:
        titles = [
            Title(title="A", rating=6.0),
            Title(title="B"),
            Title(title="C", rating=8.5),
        ]
        assert [t.title for t in TitleRanker().sort(titles)] == ["C", "A", "B"]

    def test_equal_ratings_keep_input_order(self) -> None:
        titles = [Title(title=name, rating=7.0) for name in ("x", "y", "z")]
        assert [t.title for t in TitleRanker().sort(titles)] == ["x", "y", "z"]

    def test_does_not_mutate_input(self) -> None:
        links = [_link(1), _link(5)]
        title = Title(title="A", links=links)
        TitleRanker().sort([title])
        assert title.links == links


class TestSortLinks:
    def test_bot_links_first_then_seeds(self) -> None:
        links = [_link(5), _link(0, bot=True, address="https://t.me/a?start=1"), _link(50)]
        ranked = TitleRanker().sort_links(links)
        assert ranked[0].is_bot_link
        assert [link.seeds for link in ranked[1:]] == [50, 5]

    def test_equal_seeds_stable(self) -> None:
        links = [_link(3, address="m-a"), _link(3, address="m-b"), _link(3, address="m-c")]
        ranked = TitleRanker().sort_links(links)
        assert [link.address for link in ranked] == ["m-a", "m-b", "m-c"]
