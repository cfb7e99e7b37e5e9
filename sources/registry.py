from __future__ import annotations

from typing import Dict, Iterable, List

from ports.source import DiscoverySourcePort
from sources.base import DiscoverySource
from sources.catalog import SOURCE_CATALOG


class SourceRegistry:
    """Explicit set of discovery sources, built once and passed to the orchestrator."""

    def __init__(self, sources: Iterable[DiscoverySourcePort] = ()):
        self._sources: Dict[str, DiscoverySourcePort] = {}
        for source in sources:
            self.register(source)

    def register(self, source: DiscoverySourcePort) -> None:
        self._sources[source.platform] = source

    def get_source(self, name: str) -> DiscoverySourcePort:
        if name not in self._sources:
            raise KeyError(f"Unknown source: {name}")
        return self._sources[name]

    def available_sources(self) -> List[str]:
        return list(self._sources)

    def sources(self) -> List[DiscoverySourcePort]:
        return list(self._sources.values())

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)


def build_default_registry(executor) -> SourceRegistry:
    """Registry with every catalogued platform sharing one search executor."""
    return SourceRegistry(DiscoverySource(spec, executor) for spec in SOURCE_CATALOG.values())
