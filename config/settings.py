from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip().lower() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    # Search providers
    serper_api_key: str | None
    serper_url: str
    brave_api_key: str | None
    brave_url: str

    search_provider: str
    search_fallback_provider: str | None  # None disables fallback
    search_provider_mode: str  # merge | sequential
    min_results_before_fallback: int

    # Limits/Concurrency/Timeouts
    provider_concurrency: int
    request_timeout_seconds: float

    # Discovery defaults
    discovery_max_sources: int
    discovery_parallelism: int
    discovery_max_queries: int
    discovery_max_results: int
    discovery_min_confidence: float
    unreliable_platforms: list[str]
    skip_unreliable_platforms: bool
    enable_query_normalization: bool

    # Core/runtime
    log_level: str
    run_env: str

    # Logging/tracing
    discovery_trace: bool = False
    discovery_trace_path: str = "logs/discovery_runs.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    fallback_raw = os.getenv("SEARCH_FALLBACK_PROVIDER")
    if fallback_raw is None:
        fallback: str | None = "brave"
    elif fallback_raw.strip().lower() in ("", "none"):
        fallback = None
    else:
        fallback = fallback_raw.strip().lower()

    unreliable_raw = os.getenv("UNRELIABLE_PLATFORMS")
    unreliable = _as_csv(unreliable_raw) if unreliable_raw is not None else ["crunchbase", "angellist"]

    return Settings(
        serper_api_key=os.getenv("SERPER_API_KEY"),
        serper_url=os.getenv("SERPER_URL", "https://google.serper.dev/search"),
        brave_api_key=os.getenv("BRAVE_API_KEY"),
        brave_url=os.getenv("BRAVE_URL", "https://api.search.brave.com/res/v1/web/search"),
        search_provider=os.getenv("SEARCH_PROVIDER", "serper").strip().lower(),
        search_fallback_provider=fallback,
        search_provider_mode=os.getenv("SEARCH_PROVIDER_MODE", "merge").strip().lower(),
        min_results_before_fallback=int(os.getenv("MIN_RESULTS_BEFORE_FALLBACK", "1")),
        provider_concurrency=int(os.getenv("PROVIDER_CONCURRENCY", "2")),
        request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "8")),
        discovery_max_sources=int(os.getenv("DISCOVERY_MAX_SOURCES", "5")),
        discovery_parallelism=int(os.getenv("DISCOVERY_PARALLELISM", "3")),
        discovery_max_queries=int(os.getenv("DISCOVERY_MAX_QUERIES", "3")),
        discovery_max_results=int(os.getenv("DISCOVERY_MAX_RESULTS", "5")),
        discovery_min_confidence=float(os.getenv("DISCOVERY_MIN_CONFIDENCE", "0.3")),
        unreliable_platforms=unreliable,
        skip_unreliable_platforms=_as_bool(os.getenv("SKIP_UNRELIABLE_PLATFORMS")),
        enable_query_normalization=_as_bool(os.getenv("ENABLE_QUERY_NORMALIZATION"), default=True),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        discovery_trace=_as_bool(os.getenv("DISCOVERY_TRACE")),
        discovery_trace_path=os.getenv("DISCOVERY_TRACE_PATH", "logs/discovery_runs.jsonl"),
    )
