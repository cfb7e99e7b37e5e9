from __future__ import annotations

import concurrent.futures as _fut
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.discovery import DiscoveryConfig
from config.role_priorities import platform_priorities
from models.discovery_result import DiscoveryResult, HealthStatus, SourceError, SourceResult
from models.hints import HintBundle
from models.identity import DiscoveredIdentity
from pipelines.source_discovery import sort_identities
from ports.source import DiscoverySourcePort
from sources.registry import SourceRegistry


@dataclass
class RunContext:
    hints: HintBundle
    role_type: str
    config: DiscoveryConfig
    run_id: str
    cancel_event: threading.Event = field(default_factory=threading.Event)
    results: List[SourceResult] = field(default_factory=list)
    errors: List[SourceError] = field(default_factory=list)

    def best_confidence(self) -> float:
        return max((i.confidence for r in self.results for i in r.identities), default=0.0)


def select_sources(role_type: Optional[str], registry: SourceRegistry, config: DiscoveryConfig) -> List[DiscoverySourcePort]:
    """Role priority order, truncated to ``max_sources``.

    Platforms whose base weight cannot reach ``min_confidence`` are dropped;
    unreliable platforms go last (or are skipped).
    """
    reliable: List[DiscoverySourcePort] = []
    unreliable: List[DiscoverySourcePort] = []
    for platform in platform_priorities(role_type):
        if platform not in registry:
            logging.debug(f"No source registered for {platform}, skipping", extra={"platform": platform})
            continue
        source = registry.get_source(platform)
        base_weight = config.base_weight_for(platform, source.base_weight)
        if base_weight < config.min_confidence:
            logging.info(
                f"Skipping {platform}: base weight {base_weight:.2f} below min confidence {config.min_confidence:.2f}",
                extra={"platform": platform},
            )
            continue
        if platform in config.unreliable_platforms:
            if config.skip_unreliable:
                logging.info(f"Skipping unreliable platform {platform}", extra={"platform": platform})
                continue
            unreliable.append(source)
        else:
            reliable.append(source)
    return (reliable + unreliable)[: config.max_sources]


def _run_source(source: DiscoverySourcePort, ctx: RunContext) -> SourceResult:
    return source.discover(ctx.hints, ctx.config, ctx.cancel_event)


def discover_across_sources(
    hints: HintBundle,
    role_type: Optional[str],
    registry: SourceRegistry,
    config: Optional[DiscoveryConfig] = None,
    run_id: Optional[str] = None,
) -> DiscoveryResult:
    """Discover identities for ``hints`` across the role's platforms.

    Sources run in batches of ``config.parallelism``; no further batch starts once
    any identity reaches the early-stop confidence. A failing source is recorded
    in ``errors`` and never aborts its siblings.
    """
    config = config or DiscoveryConfig()
    role = role_type or hints.role_type or "general"
    ctx = RunContext(hints=hints, role_type=role, config=config, run_id=run_id or uuid.uuid4().hex[:12])
    log_extra = {"run_id": ctx.run_id, "step": "orchestrate"}
    started = time.monotonic()

    sources = select_sources(role, registry, config)
    logging.info(
        f"Discovering {hints.external_id} as {role} across {len(sources)} sources: "
        f"{', '.join(s.platform for s in sources)}",
        extra=log_extra,
    )

    for offset in range(0, len(sources), config.parallelism):
        batch = sources[offset : offset + config.parallelism]
        with _fut.ThreadPoolExecutor(max_workers=len(batch)) as ex:
            futures = {ex.submit(_run_source, source, ctx): source for source in batch}
            batch_results: Dict[str, SourceResult] = {}
            for fut in _fut.as_completed(futures):
                source = futures[fut]
                try:
                    batch_results[source.platform] = fut.result()
                except Exception as e:
                    logging.error(
                        f"Source {source.platform} failed: {e}",
                        extra={**log_extra, "platform": source.platform, "error": str(e)},
                    )
                    ctx.errors.append(SourceError(platform=source.platform, error=str(e)))
        # Keep priority order regardless of completion order
        ctx.results.extend(batch_results[s.platform] for s in batch if s.platform in batch_results)

        if ctx.best_confidence() >= config.early_stop_confidence:
            remaining = len(sources) - offset - len(batch)
            if remaining > 0:
                logging.info(
                    f"Early stop: high confidence identity found, {remaining} sources not queried",
                    extra=log_extra,
                )
            break

    all_identities: List[DiscoveredIdentity] = sort_identities(
        [identity for result in ctx.results for identity in result.identities]
    )
    duration_ms = int((time.monotonic() - started) * 1000)
    result = DiscoveryResult(
        external_id=hints.external_id,
        role_type=role,
        run_id=ctx.run_id,
        platform_results=ctx.results,
        all_identities=all_identities,
        best_identity=all_identities[0] if all_identities else None,
        total_queries_executed=sum(r.queries_executed for r in ctx.results),
        total_duration_ms=duration_ms,
        sources_queried=[r.platform for r in ctx.results] + [e.platform for e in ctx.errors],
        errors=ctx.errors,
    )
    logging.info(
        f"Discovery finished for {hints.external_id}: {len(all_identities)} identities from "
        f"{len(result.sources_queried)} sources, {result.total_queries_executed} queries, {duration_ms}ms",
        extra={**log_extra, "duration_ms": duration_ms, "status": "ok" if not ctx.errors else "partial"},
    )
    return result


def check_all_sources_health(registry: SourceRegistry) -> Dict[str, HealthStatus]:
    statuses: Dict[str, HealthStatus] = {}
    for source in registry.sources():
        try:
            statuses[source.platform] = source.health_check()
        except Exception as e:
            logging.error(f"Health check failed for {source.platform}: {e}", extra={"platform": source.platform})
            statuses[source.platform] = HealthStatus(healthy=False, error=str(e))
    return statuses


def source_stats(registry: SourceRegistry) -> Dict[str, Any]:
    """Registered platforms with display names and base weights."""
    return {
        "total": len(registry),
        "platforms": [
            {"platform": s.platform, "display_name": s.display_name, "base_weight": s.base_weight}
            for s in registry.sources()
        ],
    }
