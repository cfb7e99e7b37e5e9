from __future__ import annotations

import threading
from typing import Optional, Protocol

from config.discovery import DiscoveryConfig
from models.discovery_result import HealthStatus, SourceResult
from models.hints import HintBundle


class DiscoverySourcePort(Protocol):
    platform: str
    display_name: str
    base_weight: float

    def discover(
        self,
        hints: HintBundle,
        config: DiscoveryConfig,
        cancel_event: Optional[threading.Event] = None,
    ) -> SourceResult:
        ...

    def health_check(self) -> HealthStatus:
        ...
