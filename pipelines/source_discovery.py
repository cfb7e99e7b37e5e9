from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Tuple

from config.discovery import DiscoveryConfig
from models.discovery_result import PlatformDiagnostics, SourceResult
from models.hints import HintBundle
from models.identity import DiscoveredIdentity, EvidencePointer
from models.search import MatchedResult, QueryCandidate, SearchOutcome
from services.bridge_detection import detect_bridge, format_persist_reason
from services.scoring import confidence_bucket, detect_contradictions, handle_match_for, score_profile
from sources.catalog import SourceSpec
from sources.profile_extraction import extract_profile, rules_for
from sources.queries import generate_query_candidates, normalize_name_query, should_normalize_query, validate_query


MAX_REJECTION_REASONS = 10
MAX_UNMATCHED_SAMPLES = 3
CONFIDENCE_SORT_DIGITS = 2
_NO_POSITION = 1_000_000


class QueryExecutor(Protocol):
    def execute(self, platform: str, query: str, max_results: int) -> SearchOutcome:
        ...


def identity_sort_key(identity: DiscoveredIdentity) -> Tuple[float, int, float]:
    """Confidence rounded to two places descending, then search position, then exact confidence."""
    position = identity.serp_position if identity.serp_position is not None else _NO_POSITION
    return (-round(identity.confidence, CONFIDENCE_SORT_DIGITS), position, -identity.confidence)


def sort_identities(identities: List[DiscoveredIdentity]) -> List[DiscoveredIdentity]:
    return sorted(identities, key=identity_sort_key)


class _RunState:
    """Mutable counters for one platform's query loop."""

    def __init__(self) -> None:
        self.queries_executed = 0
        self.search_queries: List[str] = []
        self.diagnostics = PlatformDiagnostics()
        self.errors: List[str] = []

    def record(self, outcome: SearchOutcome) -> None:
        diag = self.diagnostics
        diag.raw_result_count += outcome.raw_result_count
        diag.matched_result_count += outcome.matched_result_count
        diag.provider = outcome.provider
        if outcome.rate_limited:
            diag.rate_limited = True
        for url in outcome.unmatched_sample_urls:
            if len(diag.unmatched_sample_urls) >= MAX_UNMATCHED_SAMPLES:
                break
            if url not in diag.unmatched_sample_urls:
                diag.unmatched_sample_urls.append(url)
        if outcome.error:
            self.errors.append(outcome.error)

    def reject(self, candidate: QueryCandidate, reason: str) -> None:
        diag = self.diagnostics
        diag.queries_rejected += 1
        diag.variants_rejected.append(candidate.variant_id)
        if len(diag.rejection_reasons) < MAX_REJECTION_REASONS:
            diag.rejection_reasons.append(f"{candidate.mode}:{reason}")


def _build_identity(
    spec: SourceSpec,
    hints: HintBundle,
    result: MatchedResult,
    config: DiscoveryConfig,
    base_weight: float,
    candidate: QueryCandidate,
    query: str,
    provider: str,
) -> DiscoveredIdentity:
    profile = extract_profile(result, rules_for(spec.platform))
    bridge = detect_bridge(hints, result, profile)
    handle_match = handle_match_for(result.platform_id, result.url, hints, config.handle_variant_weights)
    breakdown = score_profile(hints, profile, bridge.has_bridge_evidence, base_weight, handle_match)
    has_contradiction, note = detect_contradictions(hints, profile)

    evidence = EvidencePointer(
        type="search_result",
        source_url=result.url,
        source_platform=spec.platform,
        description=f"{spec.display_name} profile discovered via search",
        captured_at=datetime.now(timezone.utc).isoformat(),
        metadata={
            "query": query,
            "variant_id": candidate.variant_id,
            "mode": candidate.mode,
            "provider": provider,
            "position": result.position,
        },
    )

    return DiscoveredIdentity(
        platform=spec.platform,
        platform_id=result.platform_id,
        profile_url=result.profile_url,
        display_name=profile.name,
        confidence=breakdown.total,
        confidence_bucket=confidence_bucket(breakdown.total),
        score_breakdown=breakdown,
        evidence=[evidence],
        has_contradiction=has_contradiction,
        contradiction_note=note,
        platform_profile=profile,
        bridge_tier=bridge.tier,
        bridge_signals=bridge.signals,
        persist_reason=format_persist_reason(bridge, breakdown, config.early_stop_confidence),
        serp_position=result.position,
    )


def discover_source(
    spec: SourceSpec,
    hints: HintBundle,
    executor: QueryExecutor,
    config: Optional[DiscoveryConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SourceResult:
    """Run the query loop for one platform.

    Idle -> (Skipped | NoQueries | QueryLoop -> Completed | Error). A platform whose
    base weight is below ``min_confidence`` is skipped unqueried. The loop stops on budget
    exhaustion, on a hit at or above the early-stop confidence, or when
    ``cancel_event`` is set between queries.
    """
    config = config or DiscoveryConfig()
    started = time.monotonic()
    platform = spec.platform
    base_weight = config.base_weight_for(platform, spec.base_weight)
    log_extra = {"platform": platform, "step": "discover"}

    # base_weight caps the total, so no hit here could clear min_confidence
    if base_weight < config.min_confidence:
        reason = f"base weight {base_weight:.2f} below min confidence {config.min_confidence:.2f}"
        logging.info(f"[{spec.display_name}] Skipped: {reason}", extra=log_extra)
        return SourceResult(
            platform=platform,
            status="skipped",
            diagnostics=PlatformDiagnostics(rejection_reasons=[f"source:{reason}"]),
        )

    candidates = generate_query_candidates(spec, hints, config.max_queries, config)
    if not candidates:
        logging.info(f"[{spec.display_name}] No queries to execute for {hints.external_id}", extra=log_extra)
        return SourceResult(platform=platform, status="no_queries")

    state = _RunState()
    state.diagnostics.queries_attempted = len(candidates)
    found: Dict[str, DiscoveredIdentity] = {}

    def run_search(query: str, variant_id: str, mode: str) -> SearchOutcome:
        state.queries_executed += 1
        state.search_queries.append(query)
        state.diagnostics.variants_executed.append(variant_id)
        logging.info(
            f"[{spec.display_name}] Query {state.queries_executed}/{config.max_queries}: {query!r} [{mode}] ({variant_id})",
            extra=log_extra,
        )
        outcome = executor.execute(platform, query, config.max_results)
        state.record(outcome)
        return outcome

    try:
        for candidate in candidates:
            if state.queries_executed >= config.max_queries:
                logging.info(f"[{spec.display_name}] Query budget reached ({config.max_queries})", extra=log_extra)
                break
            if cancel_event is not None and cancel_event.is_set():
                logging.info(f"[{spec.display_name}] Run cancelled, skipping remaining queries", extra=log_extra)
                break

            valid, reason = validate_query(platform, candidate.query, hints, candidate.mode)
            if not valid:
                logging.debug(
                    f"[{spec.display_name}] Query rejected ({candidate.mode}): {candidate.query!r} - {reason}",
                    extra=log_extra,
                )
                state.reject(candidate, reason or "rejected")
                continue

            query = candidate.query
            outcome = run_search(query, candidate.variant_id, candidate.mode)

            if (
                config.query_normalization
                and candidate.mode == "name"
                and outcome.matched_result_count == 0
                and should_normalize_query(candidate.query)
                and state.queries_executed < config.max_queries
            ):
                folded = normalize_name_query(candidate.query)
                if folded != candidate.query:
                    folded_outcome = run_search(folded, f"{candidate.variant_id}_folded", candidate.mode)
                    if folded_outcome.matched_result_count > outcome.matched_result_count or (
                        folded_outcome.matched_result_count == outcome.matched_result_count
                        and folded_outcome.raw_result_count > outcome.raw_result_count
                    ):
                        outcome, query = folded_outcome, folded

            early_stop = False
            for result in outcome.results:
                identity = _build_identity(
                    spec, hints, result, config, base_weight, candidate, query, outcome.provider
                )
                if identity.confidence < config.min_confidence:
                    logging.debug(
                        f"[{spec.display_name}] Skipping {result.platform_id} "
                        f"(confidence {identity.confidence:.2f} < {config.min_confidence})",
                        extra=log_extra,
                    )
                    continue

                key = result.platform_id.lower()
                existing = found.get(key)
                if existing is not None and existing.confidence >= identity.confidence:
                    continue
                found[key] = identity
                logging.info(
                    f"[{spec.display_name}] Found: {result.platform_id} (confidence: {identity.confidence:.2f}, "
                    f"tier: {identity.bridge_tier}, bucket: {identity.confidence_bucket})",
                    extra=log_extra,
                )
                if identity.confidence >= config.early_stop_confidence:
                    early_stop = True

            if early_stop:
                logging.info(f"[{spec.display_name}] Early stop: high confidence match found", extra=log_extra)
                if cancel_event is not None:
                    cancel_event.set()
                break
    except Exception as e:
        logging.exception(f"[{spec.display_name}] Discovery failed: {e}", extra={**log_extra, "error": str(e)})
        return SourceResult(
            platform=platform,
            status="error",
            queries_executed=state.queries_executed,
            search_queries=state.search_queries,
            duration_ms=int((time.monotonic() - started) * 1000),
            error=str(e),
            diagnostics=state.diagnostics,
        )

    identities = sort_identities(list(found.values()))
    state.diagnostics.identities_above_threshold = len(identities)
    duration_ms = int((time.monotonic() - started) * 1000)

    error = None
    status = "completed"
    if state.errors and not identities:
        error = "; ".join(dict.fromkeys(state.errors))
        status = "error"

    logging.info(
        f"[{spec.display_name}] Completed for {hints.external_id}: {len(identities)} identities, "
        f"{state.queries_executed} queries ({state.diagnostics.queries_rejected} rejected), {duration_ms}ms "
        f"(raw: {state.diagnostics.raw_result_count}, matched: {state.diagnostics.matched_result_count})",
        extra={**log_extra, "status": status, "duration_ms": duration_ms, "provider": state.diagnostics.provider},
    )

    return SourceResult(
        platform=platform,
        identities=identities,
        status=status,
        queries_executed=state.queries_executed,
        search_queries=state.search_queries,
        duration_ms=duration_ms,
        error=error,
        diagnostics=state.diagnostics,
    )
