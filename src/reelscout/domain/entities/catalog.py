"""Domain entities for multi-source title aggregation.

Pure value objects and the per-run session context. No framework
dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

ProviderCapability = Literal["metadata", "links", "both"]

# Placeholder quality label for Telegram bot deep links.
BOT_LINK_QUALITY = "دانلود از تلگرام"
UNKNOWN_SIZE = "N/A"


def normalize_title(text: str) -> str:
    """Lowercase and collapse all whitespace runs to a single space."""
    return " ".join(text.split()).lower()


def identity_key(title: str, year: int | None) -> str:
    """Merge key for a title: ``lowercase(title)|year`` (year may be empty)."""
    return f"{normalize_title(title)}|{year if year is not None else ''}"


class CascadeState(str, Enum):
    """Fallback-resolution state of a single Title."""

    IDLE = "idle"
    PROBING = "probing"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of an upstream provider."""

    name: str
    priority: int = 1
    capability: ProviderCapability = "links"
    # Non-English sources index titles under the canonical English title.
    prefers_master_title: bool = False


@dataclass(frozen=True)
class Link:
    """One downloadable (or placeholder) link candidate."""

    quality: str
    address: str
    size: str = UNKNOWN_SIZE
    seeds: int = 0
    source: str = ""
    label: str = ""
    is_direct: bool = False
    is_search_link: bool = False
    is_bot_link: bool = False

    @property
    def signature(self) -> tuple[str, str, str]:
        """Dedup signature: quality, size and the first 50 address chars."""
        return (self.quality, self.size, self.address[:50])

    @property
    def is_placeholder(self) -> bool:
        return self.is_search_link


@dataclass
class RawRecord:
    """Provider-native result, normalised into common field names."""

    title: str
    source: str
    year: int | None = None
    rating: float | None = None
    links: list[Link] = field(default_factory=list)

    # Best-effort metadata
    original_title: str | None = None
    poster: str | None = None
    synopsis: str | None = None
    genres: list[str] = field(default_factory=list)
    imdb_id: str | None = None

    # Second-stage lookup (see ResolvingProviderProtocol.resolve)
    detail_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Title:
    """Canonical merged entity shown to the user."""

    title: str
    year: int | None = None
    rating: float | None = None
    original_title: str | None = None
    poster: str | None = None
    synopsis: str | None = None
    genres: list[str] = field(default_factory=list)
    imdb_id: str | None = None
    links: list[Link] = field(default_factory=list)
    providers: list[str] = field(default_factory=list)
    cascade_state: CascadeState = CascadeState.IDLE

    @property
    def identity_key(self) -> str:
        return identity_key(self.title, self.year)

    @property
    def has_real_links(self) -> bool:
        """True when at least one link is not a search placeholder."""
        return any(not link.is_placeholder for link in self.links)

    @property
    def needs_fallback(self) -> bool:
        """Links are empty or placeholder-only."""
        return not self.has_real_links


@dataclass(frozen=True)
class MasterTitle:
    """Canonical (English) title and year used to query non-English sources."""

    title: str
    year: int | None = None


@dataclass(frozen=True)
class Query:
    """One aggregation run.

    ``token`` scopes the run: a session only accepts results whose token
    is still current, so an abandoned run never overwrites a newer one.
    """

    text: str
    master_title: str | None = None
    master_year: int | None = None
    token: str = field(default_factory=lambda: uuid4().hex)

    def term_for(self, descriptor: ProviderDescriptor) -> str:
        """Search term for *descriptor* (master title for non-English sources)."""
        if descriptor.prefers_master_title and self.master_title:
            return self.master_title
        return self.text


class SearchSession:
    """Caller-owned result context (one per chat/user/request scope).

    Holds the most recent run's Query and that run's working set.
    Results from older runs are rejected.
    """

    def __init__(self) -> None:
        self._query: Query | None = None
        self._titles: list[Title] = []

    @property
    def token(self) -> str | None:
        return self._query.token if self._query is not None else None

    @property
    def query(self) -> Query | None:
        return self._query

    @property
    def titles(self) -> list[Title]:
        return list(self._titles)

    def begin(self, query: Query) -> None:
        """Make *query* the current run and drop the previous working set."""
        self._query = query
        self._titles = []

    def update_query(self, query: Query) -> bool:
        """Replace the current run's Query (same token), e.g. once the
        master title is known. Returns False for a superseded run."""
        if not self.is_current(query.token):
            return False
        self._query = query
        return True

    def master_title_for(self, token: str | None = None) -> str | None:
        """Master title of the run *token* (default: the current run)."""
        if self._query is None:
            return None
        if token is not None and not self.is_current(token):
            return None
        return self._query.master_title

    def is_current(self, token: str) -> bool:
        return self.token == token

    def publish(self, token: str, titles: list[Title]) -> bool:
        """Store *titles* if *token* is still current. Returns acceptance."""
        if not self.is_current(token):
            return False
        self._titles = list(titles)
        return True

    def replace_title(self, token: str, title: Title) -> bool:
        """Swap in an enriched Title (matched by identity key)."""
        if not self.is_current(token):
            return False
        for i, existing in enumerate(self._titles):
            if existing.identity_key == title.identity_key:
                self._titles[i] = title
                return True
        return False

    def find(self, key: str) -> Title | None:
        for existing in self._titles:
            if existing.identity_key == key:
                return existing
        return None
