"""
Confidence scoring for discovered platform profiles.

The platform's base weight is a hard ceiling: ``total = base_weight * min(1, weighted_sum)``,
so ``total <= base_weight`` for every hint/profile combination.
"""
from __future__ import annotations

import re
from typing import Optional, Tuple
from urllib.parse import urlparse

from config.discovery import HandleVariantWeights
from models.hints import HintBundle
from models.identity import PlatformProfile, ScoreBreakdown
from models.platform import ConfidenceBucket
from sources.handle_variants import handle_match_score


WEIGHTS = {
    "bridge": 1.0,
    "name": 0.35,
    "company": 0.25,
    "location": 0.15,
    "completeness": 0.15,
    "activity": 0.10,
}
BRIDGE_WEIGHT = 0.5

BUCKET_THRESHOLDS: Tuple[Tuple[float, ConfidenceBucket], ...] = (
    (0.9, "auto_merge"),
    (0.7, "suggest"),
    (0.3, "low"),
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(_NON_ALNUM.sub(" ", value.lower()).split())


def name_similarity(a: Optional[str], b: Optional[str]) -> float:
    n1, n2 = normalize_text(a), normalize_text(b)
    if not n1 or not n2:
        return 0.0
    if n1 == n2:
        return 1.0
    if n1 in n2 or n2 in n1:
        return 0.8
    t1, t2 = set(n1.split()), set(n2.split())
    return len(t1 & t2) / len(t1 | t2)


def company_match(hint: Optional[str], company: Optional[str]) -> float:
    c1, c2 = normalize_text(hint), normalize_text(company)
    if not c1 or not c2:
        return 0.0
    if c1 == c2:
        return 1.0
    if c1 in c2 or c2 in c1:
        return 0.7
    return 0.0


def location_match(hint: Optional[str], location: Optional[str]) -> float:
    l1, l2 = normalize_text(hint), normalize_text(location)
    if not l1 or not l2:
        return 0.0
    if l1 == l2:
        return 1.0
    if l1 in l2 or l2 in l1:
        return 0.6
    shared = set(l1.split()) & set(l2.split())
    if any(len(token) > 2 for token in shared):
        return 0.6
    return 0.0


def profile_completeness(profile: PlatformProfile) -> float:
    fields = (profile.name, profile.bio, profile.company, profile.location)
    return sum(1 for f in fields if f) / len(fields)


def activity_score(profile: PlatformProfile) -> float:
    score = 0.0
    if (profile.followers or 0) > 10:
        score += 0.3
    if (profile.reputation or 0) > 100:
        score += 0.3
    if (profile.public_repos or 0) > 5:
        score += 0.3
    if (profile.publications or 0) > 0:
        score += 0.3
    return min(1.0, score)


def is_profile_url(url: Optional[str]) -> bool:
    """False for deep links (repos, group or project pages) that merely mention a handle."""
    if not url:
        return True
    path = urlparse(url).path or ""
    if "/groups/" in path or "/projects/" in path:
        return False
    return len([s for s in path.split("/") if s]) <= 2


def handle_match_for(
    platform_id: Optional[str],
    url: Optional[str],
    hints: HintBundle,
    weights: Optional[HandleVariantWeights] = None,
) -> float:
    score = handle_match_score(platform_id, hints.external_id, hints.name_hint, weights)
    if score and not is_profile_url(url):
        score *= 0.5
    return score


def confidence_bucket(total: float) -> ConfidenceBucket:
    for threshold, bucket in BUCKET_THRESHOLDS:
        if total >= threshold:
            return bucket
    return "rejected"


def score_profile(
    hints: HintBundle,
    profile: PlatformProfile,
    has_bridge_evidence: bool,
    base_weight: float,
    handle_match: float = 0.0,
) -> ScoreBreakdown:
    """Weighted multi-factor score of ``profile`` against ``hints``, capped by ``base_weight``."""
    name = name_similarity(hints.name_hint, profile.name)
    company = company_match(hints.effective_company(), profile.company)
    location = location_match(hints.location_hint, profile.location)
    completeness = profile_completeness(profile)
    activity = activity_score(profile)
    bridge = BRIDGE_WEIGHT if has_bridge_evidence else 0.0

    weighted_sum = (
        WEIGHTS["bridge"] * bridge
        + WEIGHTS["name"] * max(name, handle_match)
        + WEIGHTS["company"] * company
        + WEIGHTS["location"] * location
        + WEIGHTS["completeness"] * completeness
        + WEIGHTS["activity"] * activity
    )
    total = base_weight * min(1.0, weighted_sum)

    return ScoreBreakdown(
        bridge_weight=bridge,
        name_match=name,
        handle_match=handle_match,
        company_match=company,
        location_match=location,
        profile_completeness=completeness,
        activity_score=activity,
        weighted_sum=round(weighted_sum, 4),
        base_weight=base_weight,
        total=round(min(total, base_weight), 4),
    )


def detect_contradictions(hints: HintBundle, profile: PlatformProfile) -> Tuple[bool, Optional[str]]:
    """Surface hint/profile conflicts without affecting the score."""
    notes = []
    if hints.name_hint and profile.name:
        if name_similarity(hints.name_hint, profile.name) < 0.2:
            notes.append(f'Name mismatch: "{hints.name_hint}" vs "{profile.name}"')

    company_hint = hints.effective_company()
    if company_hint and profile.company:
        if (
            company_match(company_hint, profile.company) == 0
            and len(company_hint) > 3
            and len(profile.company) > 3
        ):
            notes.append(f'Company differs: "{company_hint}" vs "{profile.company}"')

    if not notes:
        return False, None
    return True, "; ".join(notes)
