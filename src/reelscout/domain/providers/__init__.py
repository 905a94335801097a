from .base import ProviderProtocol, ResolvingProviderProtocol
from .exceptions import (
    DuplicateProviderError,
    ProviderError,
    ProviderLoadError,
    ProviderNotFoundError,
    ProviderParseFailure,
    ProviderTimeout,
    ProviderUnavailable,
)

__all__ = [
    "DuplicateProviderError",
    "ProviderError",
    "ProviderLoadError",
    "ProviderNotFoundError",
    "ProviderParseFailure",
    "ProviderProtocol",
    "ProviderTimeout",
    "ProviderUnavailable",
    "ResolvingProviderProtocol",
]
