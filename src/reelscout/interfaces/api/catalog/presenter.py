"""JSON presenter for catalog entities (Title, Link, descriptors)."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, Field

from reelscout.domain.entities.catalog import (
    UNKNOWN_SIZE,
    CascadeState,
    Link,
    ProviderDescriptor,
    Title,
)


class LinkPayload(BaseModel):
    quality: str
    address: str
    size: str = UNKNOWN_SIZE
    seeds: int = 0
    source: str = ""
    label: str = ""
    is_direct: bool = False
    is_search_link: bool = False
    is_bot_link: bool = False


class TitlePayload(BaseModel):
    title: str = Field(min_length=1)
    year: int | None = None
    rating: float | None = None
    original_title: str | None = None
    poster: str | None = None
    synopsis: str | None = None
    genres: list[str] = Field(default_factory=list)
    imdb_id: str | None = None
    links: list[LinkPayload] = Field(default_factory=list)
    providers: list[str] = Field(default_factory=list)
    cascade_state: CascadeState = CascadeState.IDLE


class ResolveRequest(BaseModel):
    """Body of ``POST /resolve``."""

    title: TitlePayload
    session_id: str | None = None
    token: str | None = None
    master_title: str | None = None


def link_to_dict(link: Link) -> dict[str, Any]:
    return asdict(link)


def title_to_dict(title: Title) -> dict[str, Any]:
    return {
        "key": title.identity_key,
        "title": title.title,
        "year": title.year,
        "rating": title.rating,
        "original_title": title.original_title,
        "poster": title.poster,
        "synopsis": title.synopsis,
        "genres": list(title.genres),
        "imdb_id": title.imdb_id,
        "providers": list(title.providers),
        "cascade_state": title.cascade_state.value,
        "needs_fallback": title.needs_fallback,
        "links": [link_to_dict(link) for link in title.links],
    }


def title_from_payload(payload: TitlePayload) -> Title:
    return Title(
        title=payload.title,
        year=payload.year,
        rating=payload.rating,
        original_title=payload.original_title,
        poster=payload.poster,
        synopsis=payload.synopsis,
        genres=list(payload.genres),
        imdb_id=payload.imdb_id,
        links=[Link(**link.model_dump()) for link in payload.links],
        providers=list(payload.providers),
        cascade_state=payload.cascade_state,
    )


def descriptor_to_dict(descriptor: ProviderDescriptor) -> dict[str, Any]:
    return asdict(descriptor)
