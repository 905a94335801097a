"""Title-match scoring for fallback-provider results.

Pure transformation logic, no I/O. Compares a provider RawRecord
against the Title being resolved so that sequels, spin-offs and
unrelated hits never donate their links.

Uses **rapidfuzz** for fuzzy matching and **unidecode** for
transliteration of accented / non-Latin titles.
"""

from __future__ import annotations

import re

import structlog
from guessit import guessit
from rapidfuzz import fuzz
from unidecode import unidecode

from reelscout.domain.entities.catalog import RawRecord, Title
from reelscout.infrastructure.common.converters import extract_year

log = structlog.get_logger(__name__)

_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")

# Trailing sequel number, 1-2 digits ("Iron Man 2", "Taken 3").
_SEQUEL_RE = re.compile(r"\s+(\d{1,2})\s*$")

_PUNCT_RE = re.compile(r"[^\w\s]")


def _normalize(text: str) -> str:
    """Lowercase, transliterate to ASCII, strip punctuation, collapse ws."""
    text = unidecode(text.lower())
    text = _PUNCT_RE.sub(" ", text)
    return " ".join(text.split())


def _strip_year(text: str) -> str:
    text = _YEAR_RE.sub("", text)
    text = re.sub(r"\s*\(\s*\)\s*", " ", text)
    return text.strip()


def _sequel_number(title: str) -> int | None:
    m = _SEQUEL_RE.search(title)
    return int(m.group(1)) if m else None


def _score_pair(
    norm_ref: str,
    norm_res: str,
    *,
    reference_year: int | None,
    result_year: int | None,
    year_tolerance: int,
    year_bonus: float,
    year_penalty: float,
) -> float:
    """Score one normalised reference title against one normalised candidate."""
    if not norm_ref or not norm_res:
        return 0.0

    score = (
        max(
            fuzz.token_sort_ratio(norm_ref, norm_res, processor=None),
            fuzz.token_set_ratio(norm_ref, norm_res, processor=None),
        )
        / 100.0
    )

    if reference_year is not None and result_year is not None:
        if abs(reference_year - result_year) <= year_tolerance:
            score += year_bonus
        else:
            score -= year_penalty

    return score


def _candidates(record: RawRecord) -> list[str]:
    """Normalised title variants of *record* (raw, guessit-cleaned, original)."""
    out: list[str] = []
    seen: set[str] = set()

    def _add(text: str | None) -> None:
        if not text:
            return
        norm = _normalize(_strip_year(text))
        if norm and norm not in seen:
            seen.add(norm)
            out.append(norm)

    _add(record.title)
    _add(guessit(record.title).get("title"))
    _add(record.original_title)
    return out


def score_record(
    record: RawRecord,
    reference: Title,
    *,
    year_tolerance: int = 1,
    year_bonus: float = 0.2,
    year_penalty: float = 0.3,
    sequel_penalty: float = 0.35,
) -> float:
    """Best score (0.0 to ~1.2) over all candidate/reference title pairs."""
    candidates = _candidates(record)
    if not candidates:
        return 0.0

    result_year = record.year if record.year is not None else extract_year(record.title)
    references = [reference.title]
    if reference.original_title:
        references.append(reference.original_title)

    # guessit drops trailing numbers, so the sequel check uses the raw title.
    result_sequel = _sequel_number(candidates[0])

    best = 0.0
    for ref in references:
        norm_ref = _normalize(_strip_year(ref))
        penalty = sequel_penalty if _sequel_number(norm_ref) != result_sequel else 0.0
        for norm_res in candidates:
            s = _score_pair(
                norm_ref,
                norm_res,
                reference_year=reference.year,
                result_year=result_year,
                year_tolerance=year_tolerance,
                year_bonus=year_bonus,
                year_penalty=year_penalty,
            )
            best = max(best, s - penalty)
    return best


def filter_matching(
    records: list[RawRecord],
    reference: Title,
    threshold: float = 0.7,
    *,
    year_tolerance: int = 1,
) -> list[RawRecord]:
    """Keep records whose score against *reference* meets *threshold*."""
    kept: list[RawRecord] = []
    for record in records:
        s = score_record(record, reference, year_tolerance=year_tolerance)
        if s >= threshold:
            kept.append(record)
        else:
            log.debug(
                "title_match_filtered",
                candidate=record.title,
                reference=reference.title,
                score=round(s, 3),
                threshold=threshold,
            )
    return kept
