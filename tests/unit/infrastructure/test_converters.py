"""Tests for scraped-value converters."""

from __future__ import annotations

from reelscout.infrastructure.common.converters import (
    extract_year,
    normalize_size,
    to_int,
    to_rating,
    to_seeds,
    to_year,
)


class TestToInt:
    def test_values(self) -> None:
        assert to_int(None) is None
        assert to_int(5) == 5
        assert to_int("1,234") == 1234
        assert to_int("") is None
        assert to_int(True) is None


class TestToSeeds:
    def test_never_negative(self) -> None:
        assert to_seeds(-3) == 0
        assert to_seeds(None) == 0
        assert to_seeds("42") == 42


class TestToRating:
    def test_range(self) -> None:
        assert to_rating("7.5") == 7.5
        assert to_rating(0) == 0.0
        assert to_rating(10) == 10.0
        assert to_rating(11) is None
        assert to_rating(-1) is None
        assert to_rating("n/a") is None
        assert to_rating(None) is None


class TestYears:
    def test_to_year(self) -> None:
        assert to_year("Released 2010-07-15") == 2010
        assert to_year(1850) is None
        assert to_year(None) is None

    def test_extract_year_takes_last(self) -> None:
        assert extract_year("2001.A.Space.Odyssey.1968.1080p") == 1968
        assert extract_year("Inception 1080p") is None


class TestNormalizeSize:
    def test_binary_units(self) -> None:
        assert normalize_size("1.5 GiB") == "1.5 GB"
        assert normalize_size("700 MiB") == "700 MB"

    def test_comma_decimal(self) -> None:
        assert normalize_size("1,4 GB") == "1.4 GB"

    def test_unknown(self) -> None:
        assert normalize_size(None) == "N/A"
        assert normalize_size("") == "N/A"
        assert normalize_size("big") == "big"
