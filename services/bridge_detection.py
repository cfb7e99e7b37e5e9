"""
Bridge evidence: does a candidate profile link back to the person's known primary profile?
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from models.identity import PlatformProfile, ScoreBreakdown
from models.hints import HintBundle
from models.search import MatchedResult


TIER_1_SIGNALS = ("linkedin_url_in_bio", "linkedin_url_in_page")
TIER_2_SIGNALS = ("linkedin_url_in_team_page", "cross_platform_handle")

SIGNAL_DESCRIPTIONS = {
    "linkedin_url_in_bio": "LinkedIn URL in bio",
    "linkedin_url_in_page": "LinkedIn URL on page",
    "linkedin_url_in_team_page": "LinkedIn URL on team page",
    "cross_platform_handle": "Same username",
}

# Too common to count as the same person across platforms
GENERIC_HANDLES = frozenset({
    "dev", "developer", "admin", "root", "user", "test", "demo", "example",
    "alex", "sam", "john", "jane", "mike", "david", "chris", "james", "robert",
    "andrew", "daniel", "matt", "matthew", "mark", "peter", "tom", "steve",
    "web", "app", "code", "tech", "data", "info", "main", "home", "default",
    "engineer", "coder", "hacker", "ninja", "guru", "master", "pro",
})

_PROFILE_LINK_PATTERNS = (
    re.compile(r"linkedin\.com/in/([a-z0-9_-]+)", re.IGNORECASE),
    re.compile(r"linkedin\.com%2Fin%2F([a-z0-9_-]+)", re.IGNORECASE),
    re.compile(r"linkedin\.com%252Fin%252F([a-z0-9_-]+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class BridgeDetection:
    tier: int = 3
    signals: List[str] = field(default_factory=list)
    bridge_url: Optional[str] = None

    @property
    def has_bridge_evidence(self) -> bool:
        return self.tier == 1


def is_generic_handle(handle: str) -> bool:
    normalized = re.sub(r"[-_\d]", "", handle.lower())
    return normalized in GENERIC_HANDLES or len(normalized) < 4


def extract_profile_link_ids(text: Optional[str]) -> List[str]:
    """Lower-cased primary-profile IDs linked from ``text``, including URL-encoded links."""
    if not text:
        return []
    ids: List[str] = []
    for pattern in _PROFILE_LINK_PATTERNS:
        ids.extend(m.group(1).lower() for m in pattern.finditer(text))
    return ids


def _link_signal(text: Optional[str], target: str, single_signal: str) -> Optional[str]:
    ids = extract_profile_link_ids(text)
    if target not in ids:
        return None
    if len(set(ids)) > 1:
        return "linkedin_url_in_team_page"
    return single_signal


def detect_bridge_signals(hints: HintBundle, result: MatchedResult, profile: PlatformProfile) -> List[str]:
    signals: List[str] = []
    target = hints.external_id.lower()

    bio_signal = _link_signal(profile.bio, target, "linkedin_url_in_bio")
    if bio_signal:
        signals.append(bio_signal)

    page_text = " ".join(t for t in (result.url, result.title, result.snippet) if t)
    page_signal = _link_signal(page_text, target, "linkedin_url_in_page")
    if page_signal and page_signal not in signals:
        if page_signal == "linkedin_url_in_team_page" or not signals:
            signals.append(page_signal)

    platform_id = result.platform_id.lower()
    if not is_generic_handle(platform_id) and not is_generic_handle(target):
        normalized_platform_id = re.sub(r"[-_]", "", platform_id)
        normalized_external_id = re.sub(r"\d+$", "", re.sub(r"[-_]", "", target))
        if normalized_platform_id == normalized_external_id:
            signals.append("cross_platform_handle")

    return signals or ["none"]


def bridge_tier(signals: List[str]) -> int:
    if any(s in TIER_1_SIGNALS for s in signals):
        return 1
    if any(s in TIER_2_SIGNALS for s in signals):
        return 2
    return 3


def detect_bridge(hints: HintBundle, result: MatchedResult, profile: PlatformProfile) -> BridgeDetection:
    signals = detect_bridge_signals(hints, result, profile)
    return BridgeDetection(
        tier=bridge_tier(signals),
        signals=[s for s in signals if s != "none"],
        bridge_url=result.url,
    )


def _score_reason(score: ScoreBreakdown) -> str:
    parts = []
    if score.handle_match > 0.3:
        parts.append(f"handle {score.handle_match * 100:.0f}%")
    if score.name_match > 0.1:
        parts.append(f"name {score.name_match * 100:.0f}%")
    if score.company_match > 0:
        parts.append("company match")
    if score.location_match > 0:
        parts.append("location match")
    return ", ".join(parts) if parts else "search result"


def format_persist_reason(bridge: BridgeDetection, score: ScoreBreakdown, auto_merge_threshold: float = 0.9) -> str:
    if bridge.signals:
        signal_text = ", ".join(SIGNAL_DESCRIPTIONS.get(s, s) for s in bridge.signals)
    else:
        signal_text = _score_reason(score)
    percent = f"{score.total * 100:.0f}%"

    if bridge.tier == 1:
        if score.total >= auto_merge_threshold:
            return f"Tier 1, auto-merge eligible ({percent} >= {auto_merge_threshold * 100:.0f}%): {signal_text}"
        return f"Tier 1 bridge detected ({percent} < {auto_merge_threshold * 100:.0f}% auto-merge): {signal_text}"
    if bridge.tier == 2:
        return f"Tier 2 (review): {signal_text}"
    return f"Tier 3 ({percent}): {signal_text}"
