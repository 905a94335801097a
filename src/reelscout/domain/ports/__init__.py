from .cache import CachePort
from .metadata import MasterTitleResolverPort
from .provider_registry import ProviderRegistryPort

__all__ = [
    "CachePort",
    "MasterTitleResolverPort",
    "ProviderRegistryPort",
]
