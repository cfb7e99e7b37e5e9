"""Canonical variant taxonomy.

Raw variant ids are free-form labels attached by the query generator
(``handle:clean``, ``name+company``, ``name:full_folded`` ...). For dashboards
and run traces they are folded into six canonical buckets.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List


CANONICAL_VARIANTS = (
    "handle:primary",
    "handle:derived",
    "name:full",
    "name:full+company",
    "name:full+location",
    "name:full+title",
)

_CANONICAL_MAPPINGS: Dict[str, str] = {
    "handle:clean": "handle:primary",
    "handle:primary": "handle:primary",
    "handle:raw": "handle:primary",
    "handle:derived": "handle:derived",
    "handle:stripped": "handle:derived",
    "handle:collapsed": "handle:derived",
    "handle:underscore": "handle:derived",
    "handle:dot": "handle:derived",
    "handle:name_initial_last": "handle:derived",
    "handle:name_first_dot_last": "handle:derived",
    "handle:name_first_last": "handle:derived",
    "name:full": "name:full",
    "name+company": "name:full+company",
    "name+location": "name:full+location",
    "name+headline_title": "name:full+title",
}


def canonicalize_variant(raw_variant_id: str) -> str:
    if raw_variant_id in _CANONICAL_MAPPINGS:
        return _CANONICAL_MAPPINGS[raw_variant_id]

    if raw_variant_id.startswith("handle:"):
        if any(tag in raw_variant_id for tag in ("clean", "primary", "raw")):
            return "handle:primary"
        return "handle:derived"

    if raw_variant_id.startswith("name:") or raw_variant_id.startswith("name+"):
        if "company" in raw_variant_id or "org" in raw_variant_id:
            return "name:full+company"
        if "location" in raw_variant_id:
            return "name:full+location"
        if "title" in raw_variant_id or "headline" in raw_variant_id:
            return "name:full+title"
        return "name:full"

    logging.warning(f"Unknown variant id {raw_variant_id!r}, defaulting to name:full")
    return "name:full"


def aggregate_by_canonical(variant_ids: Iterable[str]) -> Dict[str, int]:
    counts = {variant: 0 for variant in CANONICAL_VARIANTS}
    for variant_id in variant_ids:
        counts[canonicalize_variant(variant_id)] += 1
    return counts


def build_variant_stats(executed: List[str], rejected: List[str]) -> Dict[str, Dict]:
    return {
        "executed": {"raw": list(executed), "canonical": aggregate_by_canonical(executed)},
        "rejected": {"raw": list(rejected), "canonical": aggregate_by_canonical(rejected)},
    }
