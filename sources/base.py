from __future__ import annotations

import threading
from typing import Optional

from config.discovery import DiscoveryConfig
from models.discovery_result import HealthStatus, SourceResult
from models.hints import HintBundle
from pipelines.source_discovery import QueryExecutor, discover_source
from sources.catalog import SourceSpec


class DiscoverySource:
    """A platform as a discovery source: a catalog record bound to a search executor.

    All platforms share the same discovery algorithm; behaviour differences live
    in the record (weight, mode, site scope) and the platform's pattern and
    extraction rules.
    """

    def __init__(self, spec: SourceSpec, executor: QueryExecutor):
        self.spec = spec
        self.executor = executor

    @property
    def platform(self) -> str:
        return self.spec.platform

    @property
    def display_name(self) -> str:
        return self.spec.display_name

    @property
    def base_weight(self) -> float:
        return self.spec.base_weight

    def discover(
        self,
        hints: HintBundle,
        config: DiscoveryConfig,
        cancel_event: Optional[threading.Event] = None,
    ) -> SourceResult:
        return discover_source(self.spec, hints, self.executor, config, cancel_event)

    def health_check(self) -> HealthStatus:
        check = getattr(self.executor, "health_check", None)
        if check is None:
            return HealthStatus(healthy=True)
        return check()

    def __repr__(self) -> str:
        return f"DiscoverySource({self.platform!r})"
