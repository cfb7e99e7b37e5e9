from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.identity import DiscoveredIdentity
from models.platform import SourceStatus


class PlatformDiagnostics(BaseModel):
    """Per-platform observability counters; never used for scoring."""

    queries_attempted: int = 0
    queries_rejected: int = 0
    rejection_reasons: list[str] = Field(default_factory=list)
    variants_executed: list[str] = Field(default_factory=list)
    variants_rejected: list[str] = Field(default_factory=list)
    raw_result_count: int = 0
    matched_result_count: int = 0
    unmatched_sample_urls: list[str] = Field(default_factory=list)
    identities_above_threshold: int = 0
    rate_limited: bool = False
    provider: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceResult(BaseModel):
    """Outcome of discovery on one platform."""

    platform: str
    identities: list[DiscoveredIdentity] = Field(default_factory=list)
    status: SourceStatus = "completed"
    queries_executed: int = 0
    search_queries: list[str] = Field(default_factory=list)
    duration_ms: int = 0
    error: str | None = None
    diagnostics: PlatformDiagnostics = Field(default_factory=PlatformDiagnostics)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceError(BaseModel):
    platform: str
    error: str


class DiscoveryResult(BaseModel):
    """Aggregate of a multi-source run handed to downstream collaborators."""

    external_id: str
    role_type: str
    run_id: str | None = None
    platform_results: list[SourceResult] = Field(default_factory=list)
    all_identities: list[DiscoveredIdentity] = Field(default_factory=list)
    best_identity: DiscoveredIdentity | None = None
    total_queries_executed: int = 0
    total_duration_ms: int = 0
    sources_queried: list[str] = Field(default_factory=list)
    errors: list[SourceError] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(BaseModel):
    healthy: bool
    latency_ms: int | None = None
    error: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
