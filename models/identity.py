from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.platform import ConfidenceBucket


class PlatformProfile(BaseModel):
    """Profile signals extracted from a search hit's title and snippet."""

    name: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    followers: int | None = None
    reputation: int | None = None
    public_repos: int | None = None
    publications: int | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ScoreBreakdown(BaseModel):
    """Weighted sub-scores behind a confidence value; ``total`` never exceeds ``base_weight``."""

    bridge_weight: float = 0.0
    name_match: float = 0.0
    handle_match: float = 0.0
    company_match: float = 0.0
    location_match: float = 0.0
    profile_completeness: float = 0.0
    activity_score: float = 0.0
    weighted_sum: float = 0.0
    base_weight: float = 0.0
    total: float = 0.0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class EvidencePointer(BaseModel):
    type: str
    source_url: str
    source_platform: str
    description: str
    captured_at: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DiscoveredIdentity(BaseModel):
    """A scored candidate account; created once per (platform, platform_id) and never mutated."""

    platform: str
    platform_id: str
    profile_url: str
    display_name: str | None = None
    confidence: float
    confidence_bucket: ConfidenceBucket
    score_breakdown: ScoreBreakdown
    evidence: list[EvidencePointer] = Field(default_factory=list)
    has_contradiction: bool = False
    contradiction_note: str | None = None
    platform_profile: PlatformProfile = Field(default_factory=PlatformProfile)
    bridge_tier: int = 3
    bridge_signals: list[str] = Field(default_factory=list)
    persist_reason: str | None = None
    serp_position: int | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
