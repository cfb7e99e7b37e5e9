from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.platform import QueryMode


class QueryCandidate(BaseModel):
    """A search-engine query proposed for one platform; ephemeral."""

    query: str
    mode: QueryMode
    variant_id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RawSearchResult(BaseModel):
    """Provider-agnostic search hit."""

    url: str
    title: str = ""
    snippet: str = ""
    position: int = 0

    model_config = ConfigDict(extra="ignore", frozen=True)


class MatchedResult(RawSearchResult):
    """A raw hit that matched a platform URL pattern."""

    platform: str
    platform_id: str
    profile_url: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RawSearchResponse(BaseModel):
    """Raw results plus provider attribution, before pattern matching."""

    results: list[RawSearchResult] = Field(default_factory=list)
    provider: str
    rate_limited: bool = False
    error: str | None = None


class SearchOutcome(BaseModel):
    """Platform-matched results of one executed query, with diagnostics counters."""

    results: list[MatchedResult] = Field(default_factory=list)
    raw_result_count: int = 0
    matched_result_count: int = 0
    unmatched_sample_urls: list[str] = Field(default_factory=list)
    rate_limited: bool = False
    provider: str
    error: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
