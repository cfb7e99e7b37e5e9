from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from models.discovery_result import DiscoveryResult
from sources.variant_taxonomy import build_variant_stats


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def build_run_record(result: DiscoveryResult, extras: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    platforms: Dict[str, Any] = {}
    for source_result in result.platform_results:
        diag = source_result.diagnostics
        platforms[source_result.platform] = {
            "identities": len(source_result.identities),
            "queries_executed": source_result.queries_executed,
            "duration_ms": source_result.duration_ms,
            "error": source_result.error,
            "diagnostics": diag.model_dump(by_alias=True),
            "variants": build_variant_stats(diag.variants_executed, diag.variants_rejected),
        }

    best = result.best_identity
    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "run_id": result.run_id,
        "external_id": result.external_id,
        "role_type": result.role_type,
        "sources_queried": result.sources_queried,
        "identities_found": len(result.all_identities),
        "best": (
            {"platform": best.platform, "platform_id": best.platform_id, "confidence": best.confidence}
            if best
            else None
        ),
        "total_queries_executed": result.total_queries_executed,
        "total_duration_ms": result.total_duration_ms,
        "errors": [e.model_dump() for e in result.errors],
        "platforms": platforms,
    }
    if extras:
        # Shallow merge extras under a dedicated key to avoid collisions
        payload["extras"] = extras
    return payload


def log_discovery_run(
    result: DiscoveryResult,
    *,
    enabled: bool,
    log_path: str,
    extras: Optional[Dict[str, Any]] = None,
) -> bool:
    """Append a single JSON line describing a discovery run if tracing is enabled.

    Returns True when a line was written.
    """
    if not enabled:
        return False

    path = Path(log_path)
    try:
        _ensure_parent_dir(path)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(build_run_record(result, extras), ensure_ascii=False) + "\n")
    except OSError as e:
        # Never break a run on trace failures
        logging.warning(f"Discovery trace write failed: {e}", extra={"step": "trace", "error": str(e)})
        return False
    return True
