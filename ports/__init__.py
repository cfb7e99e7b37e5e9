from .search_provider import SearchProviderPort
from .source import DiscoverySourcePort

__all__ = [
    "SearchProviderPort",
    "DiscoverySourcePort",
]
