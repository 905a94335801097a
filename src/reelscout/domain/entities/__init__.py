from .catalog import (
    BOT_LINK_QUALITY,
    UNKNOWN_SIZE,
    CascadeState,
    Link,
    MasterTitle,
    ProviderCapability,
    ProviderDescriptor,
    Query,
    RawRecord,
    SearchSession,
    Title,
    identity_key,
    normalize_title,
)

__all__ = [
    "BOT_LINK_QUALITY",
    "UNKNOWN_SIZE",
    "CascadeState",
    "Link",
    "MasterTitle",
    "ProviderCapability",
    "ProviderDescriptor",
    "Query",
    "RawRecord",
    "SearchSession",
    "Title",
    "identity_key",
    "normalize_title",
]
