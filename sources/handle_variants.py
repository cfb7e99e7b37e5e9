from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal, Optional

from config.discovery import HandleVariantWeights


HandleSource = Literal["external_id", "derived", "name"]

_TRAILING_DIGITS = re.compile(r"-?\d+$")
_SEPARATORS_AND_DIGITS = re.compile(r"[-_.\d]+")


@dataclass(frozen=True)
class HandleVariant:
    handle: str
    source: HandleSource
    confidence: float
    variant_id: str


def generate_handle_variants(
    external_id: str,
    name_hint: Optional[str] = None,
    max_variants: int = 5,
    weights: Optional[HandleVariantWeights] = None,
) -> List[HandleVariant]:
    """Probable account handles on other platforms, best guess first.

    ``john-doe-1234`` with name ``John Doe`` yields ``john-doe-1234``, ``john-doe``,
    ``johndoe``, ``john_doe``, ``john.doe``, ``jdoe`` ...
    """
    weights = weights or HandleVariantWeights()
    variants: List[HandleVariant] = []
    seen: set[str] = set()

    def add(handle: str, source: HandleSource, confidence: float, variant_id: str) -> None:
        normalized = handle.lower().strip()
        if len(normalized) >= 2 and normalized not in seen:
            seen.add(normalized)
            variants.append(HandleVariant(normalized, source, confidence, variant_id))

    raw = (external_id or "").strip()
    if raw:
        add(raw, "external_id", weights.verbatim, "handle:clean")

        stripped = _TRAILING_DIGITS.sub("", raw)
        if stripped and stripped != raw:
            add(stripped, "derived", weights.stripped_suffix, "handle:stripped")

        collapsed = _SEPARATORS_AND_DIGITS.sub("", raw)
        if collapsed and collapsed != raw:
            add(collapsed, "derived", weights.collapsed, "handle:collapsed")

        base = _TRAILING_DIGITS.sub("", raw)
        if "-" in base:
            add(base.replace("-", "_"), "derived", weights.underscore, "handle:underscore")
            add(base.replace("-", "."), "derived", weights.dot, "handle:dot")

    if name_hint:
        parts = [p for p in re.split(r"\s+", name_hint.strip()) if p]
        if len(parts) >= 2:
            first, last = parts[0], parts[-1]
            add(f"{first[0]}{last}", "name", weights.initial_last, "handle:name_initial_last")
            add(f"{first}.{last}", "name", weights.first_dot_last, "handle:name_first_dot_last")
            add(f"{first}{last}", "name", weights.first_last, "handle:name_first_last")

    variants.sort(key=lambda v: v.confidence, reverse=True)
    return variants[:max_variants]


def handle_match_score(
    platform_id: Optional[str],
    external_id: Optional[str],
    name_hint: Optional[str] = None,
    weights: Optional[HandleVariantWeights] = None,
) -> float:
    """1.0 when the platform id equals the external id, else the weight of the matching variant."""
    if not platform_id or not external_id:
        return 0.0
    pid = platform_id.lower()
    if pid == external_id.lower():
        return 1.0
    for variant in generate_handle_variants(external_id, name_hint, max_variants=8, weights=weights):
        if variant.handle == pid:
            return variant.confidence
    return 0.0
