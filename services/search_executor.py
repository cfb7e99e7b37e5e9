from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from config.discovery import DiscoveryConfig
from config.settings import Settings
from models.discovery_result import HealthStatus
from models.search import MatchedResult, RawSearchResponse, RawSearchResult, SearchOutcome
from ports.search_provider import SearchProviderPort
from services.domain_utils import origin_and_path
from services.search_providers import build_provider
from sources.platforms import PLATFORM_PATTERNS


_RATE_LIMIT_RE = re.compile(r"rate.?limit|429|too many requests", re.IGNORECASE)
MAX_UNMATCHED_SAMPLES = 3


def is_rate_limited_error(error: object) -> bool:
    if error is None:
        return False
    status = getattr(error, "status", None)
    if status in (429, 503):
        return True
    return bool(_RATE_LIMIT_RE.search(str(error)))


def merge_raw_results(*result_sets: List[RawSearchResult], max_results: Optional[int] = None) -> List[RawSearchResult]:
    """Union by lower-cased URL keeping the best (lowest) position, sorted by position."""
    by_url: Dict[str, RawSearchResult] = {}
    for results in result_sets:
        for result in results:
            key = result.url.lower()
            existing = by_url.get(key)
            if existing is None or result.position < existing.position:
                by_url[key] = result
    merged = sorted(by_url.values(), key=lambda r: r.position)
    return merged[:max_results] if max_results is not None else merged


class SearchExecutor:
    """Runs queries against a primary and an optional fallback provider.

    ``merge`` mode queries both concurrently and unions the results;
    ``sequential`` mode only asks the fallback when the primary returns fewer
    than ``min_results_before_fallback`` results. Provider failures are
    reported on the response, never raised.
    """

    def __init__(
        self,
        primary: SearchProviderPort,
        fallback: Optional[SearchProviderPort] = None,
        mode: str = "merge",
        min_results_before_fallback: int = 1,
    ):
        self.primary = primary
        self.fallback = fallback
        self.mode = mode
        self.min_results_before_fallback = min_results_before_fallback

    @property
    def providers(self) -> List[SearchProviderPort]:
        return [p for p in (self.primary, self.fallback) if p is not None]

    def _call(self, provider: SearchProviderPort, query: str, max_results: int) -> RawSearchResponse:
        try:
            results = provider.search_raw(query, max_results)
            return RawSearchResponse(results=list(results), provider=provider.name)
        except Exception as e:
            limited = is_rate_limited_error(e)
            if limited:
                logging.warning(f"{provider.name} rate limited for {query!r}: {e}", extra={"provider": provider.name})
            else:
                logging.error(f"{provider.name} search failed for {query!r}: {e}", extra={"provider": provider.name})
            return RawSearchResponse(provider=provider.name, rate_limited=limited, error=str(e))

    def _combine(self, first: RawSearchResponse, second: RawSearchResponse, max_results: int) -> RawSearchResponse:
        merged = merge_raw_results(first.results, second.results, max_results=max_results)
        if first.results and second.results:
            provider = f"merged:{first.provider}+{second.provider}"
        elif second.results:
            provider = second.provider
        else:
            provider = first.provider
        errors = [r.error for r in (first, second) if r.error]
        return RawSearchResponse(
            results=merged,
            provider=provider,
            rate_limited=first.rate_limited or second.rate_limited,
            error="; ".join(errors) if errors and not merged else None,
        )

    def search_raw(self, query: str, max_results: int) -> RawSearchResponse:
        if self.fallback is None:
            return self._call(self.primary, query, max_results)

        if self.mode == "merge":
            with ThreadPoolExecutor(max_workers=2) as pool:
                primary_future = pool.submit(self._call, self.primary, query, max_results)
                fallback_future = pool.submit(self._call, self.fallback, query, max_results)
                primary, fallback = primary_future.result(), fallback_future.result()
            return self._combine(primary, fallback, max_results)

        primary = self._call(self.primary, query, max_results)
        if len(primary.results) >= self.min_results_before_fallback:
            return primary
        logging.info(
            f"{self.primary.name} returned {len(primary.results)} results, trying {self.fallback.name}",
            extra={"provider": self.fallback.name},
        )
        fallback = self._call(self.fallback, query, max_results)
        return self._combine(primary, fallback, max_results)

    def execute(self, platform: str, query: str, max_results: int) -> SearchOutcome:
        """Search and keep only results matching the platform's URL pattern, deduplicated by ID."""
        pattern = PLATFORM_PATTERNS[platform]
        response = self.search_raw(query, max_results * 2)

        matched: List[MatchedResult] = []
        seen_ids: set[str] = set()
        unmatched: List[str] = []
        matched_count = 0

        for result in response.results:
            platform_id = pattern.extract_id(result.url)
            if not platform_id:
                sample = origin_and_path(result.url)
                if len(unmatched) < MAX_UNMATCHED_SAMPLES and sample not in unmatched:
                    unmatched.append(sample)
                continue
            matched_count += 1
            key = platform_id.lower()
            if key in seen_ids:
                continue
            seen_ids.add(key)
            matched.append(
                MatchedResult(
                    url=result.url,
                    title=result.title,
                    snippet=result.snippet,
                    position=result.position,
                    platform=platform,
                    platform_id=platform_id,
                    profile_url=pattern.build_profile_url(platform_id),
                )
            )

        return SearchOutcome(
            results=matched[:max_results],
            raw_result_count=len(response.results),
            matched_result_count=matched_count,
            unmatched_sample_urls=unmatched,
            rate_limited=response.rate_limited,
            provider=response.provider,
            error=response.error,
        )

    def health_check(self) -> HealthStatus:
        """Healthy when any configured provider is healthy."""
        statuses = [p.health_check() for p in self.providers]
        for status in statuses:
            if status.healthy:
                return status
        errors = [s.error for s in statuses if s.error]
        return HealthStatus(healthy=False, error="; ".join(errors) or "no healthy provider")


def build_search_executor(settings: Settings, config: Optional[DiscoveryConfig] = None, session=None) -> SearchExecutor:
    config = config or DiscoveryConfig.from_settings(settings)
    primary = build_provider(settings.search_provider, settings, session=session)
    fallback = None
    if settings.search_fallback_provider and settings.search_fallback_provider != settings.search_provider:
        fallback = build_provider(settings.search_fallback_provider, settings, session=session)
    return SearchExecutor(
        primary,
        fallback,
        mode=config.provider_mode,
        min_results_before_fallback=config.min_results_before_fallback,
    )
