from __future__ import annotations

from typing import List, Protocol

from models.discovery_result import HealthStatus
from models.search import RawSearchResult


class SearchProviderPort(Protocol):
    name: str

    def search_raw(self, query: str, max_results: int) -> List[RawSearchResult]:
        ...

    def health_check(self) -> HealthStatus:
        ...
