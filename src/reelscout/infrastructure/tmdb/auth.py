"""TMDB credential handling shared by the client and the TMDB provider."""

from __future__ import annotations

BASE_URL = "https://api.themoviedb.org/3"
POSTER_BASE = "https://image.tmdb.org/t/p/w500"


def auth_parts(api_key: str) -> tuple[dict[str, str], dict[str, str]]:
    """Return ``(headers, params)`` for *api_key*.

    v4 read-access tokens (JWTs, ``eyJ...``) go into a Bearer header;
    classic v3 keys go into the ``api_key`` query parameter.
    """
    if api_key.startswith("eyJ"):
        return {"Authorization": f"Bearer {api_key}"}, {}
    return {}, {"api_key": api_key}


def poster_url(poster_path: str | None, base: str = POSTER_BASE) -> str | None:
    if not poster_path:
        return None
    return f"{base}{poster_path}"


def release_year(date: str | None) -> int | None:
    """``"2010-07-15"`` → ``2010``."""
    if not date or len(date) < 4 or not date[:4].isdigit():
        return None
    return int(date[:4])
