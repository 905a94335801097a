"""Provider system exceptions."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all provider-related errors."""


class ProviderTimeout(ProviderError):
    """Upstream did not answer within the configured timeout."""


class ProviderParseFailure(ProviderError):
    """Upstream answered but the payload could not be interpreted."""


class ProviderUnavailable(ProviderError):
    """Every known mirror of the upstream failed."""


class ProviderLoadError(ProviderError):
    """Raised when a provider module fails to import or does not match the protocol."""


class ProviderNotFoundError(ProviderError):
    """Raised when a provider name is not known to the registry."""


class DuplicateProviderError(ProviderError):
    """Raised when two providers resolve to the same name."""
