from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from config.role_priorities import DEFAULT_UNRELIABLE_PLATFORMS
from config.settings import Settings
from models.platform import PLATFORMS


PROVIDER_MODES = ("merge", "sequential")


@dataclass(frozen=True)
class HandleVariantWeights:
    """Heuristic likelihood that a handle transformation preserves the real handle."""

    verbatim: float = 0.9
    stripped_suffix: float = 0.85
    collapsed: float = 0.7
    underscore: float = 0.65
    dot: float = 0.6
    initial_last: float = 0.5
    first_dot_last: float = 0.45
    first_last: float = 0.4

    def __post_init__(self) -> None:
        for name, value in self.__dict__.items():
            if not 0.0 <= float(value) <= 1.0:
                raise ValueError(f"Handle variant weight {name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class DiscoveryConfig:
    """Explicit, validated configuration for one discovery run.

    Built once at the boundary (usually via ``from_settings``) and passed down by
    value; nothing below this layer reads the process environment.
    """

    max_sources: int = 5
    parallelism: int = 3
    max_queries: int = 3
    max_results: int = 5
    min_confidence: float = 0.3
    early_stop_confidence: float = 0.9

    unreliable_platforms: frozenset[str] = DEFAULT_UNRELIABLE_PLATFORMS
    skip_unreliable: bool = False

    provider_mode: str = "merge"
    min_results_before_fallback: int = 1

    max_handle_variants: int = 3
    handle_variant_weights: HandleVariantWeights = field(default_factory=HandleVariantWeights)
    query_normalization: bool = True

    # Per-run override of a platform's base weight
    platform_weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_sources < 1:
            raise ValueError("max_sources must be >= 1")
        if self.parallelism < 1:
            raise ValueError("parallelism must be >= 1")
        if self.max_queries < 1:
            raise ValueError("max_queries must be >= 1")
        if self.max_results < 1:
            raise ValueError("max_results must be >= 1")
        if self.max_handle_variants < 1:
            raise ValueError("max_handle_variants must be >= 1")
        if self.min_results_before_fallback < 0:
            raise ValueError("min_results_before_fallback must be >= 0")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError("min_confidence must be within [0, 1]")
        if not 0.0 < self.early_stop_confidence <= 1.0:
            raise ValueError("early_stop_confidence must be within (0, 1]")
        if self.provider_mode not in PROVIDER_MODES:
            raise ValueError(f"Unknown provider mode: {self.provider_mode}")

        unknown = [p for p in list(self.unreliable_platforms) + list(self.platform_weights) if p not in PLATFORMS]
        if unknown:
            raise ValueError(f"Unknown platform(s): {', '.join(sorted(set(unknown)))}")
        for platform, weight in self.platform_weights.items():
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"Base weight for {platform} must be within [0, 1], got {weight}")

        # Normalize collections so callers may pass lists/dicts
        object.__setattr__(self, "unreliable_platforms", frozenset(self.unreliable_platforms))
        object.__setattr__(self, "platform_weights", dict(self.platform_weights))

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "DiscoveryConfig":
        values = dict(
            max_sources=settings.discovery_max_sources,
            parallelism=settings.discovery_parallelism,
            max_queries=settings.discovery_max_queries,
            max_results=settings.discovery_max_results,
            min_confidence=settings.discovery_min_confidence,
            unreliable_platforms=frozenset(settings.unreliable_platforms),
            skip_unreliable=settings.skip_unreliable_platforms,
            provider_mode=settings.search_provider_mode,
            min_results_before_fallback=settings.min_results_before_fallback,
            query_normalization=settings.enable_query_normalization,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def base_weight_for(self, platform: str, default: float) -> float:
        return float(self.platform_weights.get(platform, default))
