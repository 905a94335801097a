from .aggregate_titles import AggregateTitlesUseCase, SearchRun
from .resolve_links import CascadeAttempt, CascadeOutcome, ResolveLinksUseCase

__all__ = [
    "AggregateTitlesUseCase",
    "CascadeAttempt",
    "CascadeOutcome",
    "ResolveLinksUseCase",
    "SearchRun",
]
