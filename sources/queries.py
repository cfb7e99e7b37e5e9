"""Query candidate generation and the query quality gate.

Generation is deterministic and side-effect free: the same hints always yield the
same ordered candidates. The gate runs before a query is spent and rejects
queries that are semantically incomplete.
"""
from __future__ import annotations

import re
import unicodedata
from typing import List, Optional, Tuple

from config.discovery import DiscoveryConfig
from models.hints import HintBundle
from models.search import QueryCandidate
from sources.catalog import SourceSpec
from sources.handle_variants import generate_handle_variants


_HANDLE_CHARS = r"[a-z0-9_.-]+"

_PLATFORM_HANDLE_PATTERNS = {
    "leetcode": (rf"site:leetcode\.com/u/{_HANDLE_CHARS}",),
    "npm": (rf"site:npmjs\.com/~{_HANDLE_CHARS}",),
    "medium": (rf"site:medium\.com/@{_HANDLE_CHARS}",),
    "hackerearth": (
        rf"site:hackerearth\.com/@{_HANDLE_CHARS}",
        rf"site:hackerearth\.com/users/{_HANDLE_CHARS}",
        rf"site:hackerearth\.com/people/{_HANDLE_CHARS}",
    ),
    "gitlab": (rf"site:gitlab\.com/{_HANDLE_CHARS}$", rf"site:gitlab\.com/users/{_HANDLE_CHARS}"),
    "pypi": (rf"site:pypi\.org/user/{_HANDLE_CHARS}",),
    "dockerhub": (rf"site:hub\.docker\.com/[ur]/{_HANDLE_CHARS}",),
    "gist": (rf"site:gist\.github\.com/{_HANDLE_CHARS}",),
    "github": (rf"site:github\.com/{_HANDLE_CHARS}",),
    "kaggle": (rf"site:kaggle\.com/{_HANDLE_CHARS}",),
    "huggingface": (rf"site:huggingface\.co/{_HANDLE_CHARS}",),
    "dribbble": (rf"site:dribbble\.com/{_HANDLE_CHARS}",),
    "behance": (rf"site:behance\.net/{_HANDLE_CHARS}",),
    "codepen": (rf"site:codepen\.io/{_HANDLE_CHARS}",),
    "devto": (rf"site:dev\.to/{_HANDLE_CHARS}",),
    "twitter": (rf"site:(?:twitter|x)\.com/{_HANDLE_CHARS}",),
    "angellist": (rf"site:angel\.co/u/{_HANDLE_CHARS}",),
}
PLATFORM_HANDLE_PATTERNS = {
    platform: tuple(re.compile(p, re.IGNORECASE) for p in patterns)
    for platform, patterns in _PLATFORM_HANDLE_PATTERNS.items()
}

GENERIC_HANDLE_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        rf"site:\S+/u/{_HANDLE_CHARS}",
        rf"site:\S+/~{_HANDLE_CHARS}",
        rf"site:\S+/@{_HANDLE_CHARS}",
        rf"site:\S+/users?/{_HANDLE_CHARS}",
    )
)

_SITE_PREFIX = re.compile(r"site:\S+\s*")
_FILLER_WORDS = re.compile(r"\s+(author|maintainer|profile)\s*", re.IGNORECASE)


def is_complete_handle_query(query: str, platform: Optional[str] = None) -> bool:
    """True for queries such as ``site:npmjs.com/~abc``; short handles are still complete."""
    for pattern in PLATFORM_HANDLE_PATTERNS.get(platform or "", ()):
        if pattern.search(query):
            return True
    return any(p.search(query) for p in GENERIC_HANDLE_PATTERNS)


def validate_query(platform: str, query: str, hints: HintBundle, mode: str) -> Tuple[bool, Optional[str]]:
    """Quality gate. Returns ``(valid, reason)``; ``reason`` is None for valid queries."""
    trimmed = query.strip()

    if is_complete_handle_query(trimmed, platform):
        return True, None

    content = _SITE_PREFIX.sub("", trimmed).replace('"', "")
    content = _FILLER_WORDS.sub("", content).strip()

    if len(content) < 3:
        return False, "Query content too short"

    lowered = content.lower()
    name_words = (hints.name_hint or "").split()

    if mode == "handle":
        has_full_name = len(name_words) >= 2 and all(w.lower() in lowered for w in name_words)
        if has_full_name and hints.external_id not in content:
            return False, "Handle query contains full name instead of handle"

    if name_words and lowered == name_words[0].lower():
        return False, "Query contains only first name"

    if not hints.external_id and not hints.name_hint:
        return False, "Query lacks both external id and name"

    return True, None


def _scoped(site: str, *terms: str) -> str:
    return " ".join(t for t in (site, *terms) if t)


def _quoted(value: str) -> str:
    return f'"{value}"'


def _handle_queries(spec: SourceSpec, hints: HintBundle, max_queries: int, config: DiscoveryConfig) -> List[QueryCandidate]:
    candidates: List[QueryCandidate] = []
    variants = generate_handle_variants(
        hints.external_id,
        hints.name_hint,
        max_variants=config.max_handle_variants,
        weights=config.handle_variant_weights,
    )

    for pattern in spec.site_patterns:
        for variant in variants:
            if len(candidates) >= max_queries:
                break
            candidates.append(QueryCandidate(query=f"{pattern}{variant.handle}", mode="handle", variant_id=variant.variant_id))
        if len(candidates) >= max_queries:
            break

    company = hints.effective_company()
    site = spec.name_site()
    if len(candidates) < max_queries and hints.name_hint:
        candidates.append(QueryCandidate(query=_scoped(site, _quoted(hints.name_hint)), mode="name", variant_id="name:full"))
    if len(candidates) < max_queries and hints.name_hint and company:
        candidates.append(
            QueryCandidate(
                query=_scoped(site, _quoted(hints.name_hint), _quoted(company)),
                mode="name",
                variant_id="name+company",
            )
        )
    return candidates[:max_queries]


def _name_queries(spec: SourceSpec, hints: HintBundle, max_queries: int) -> List[QueryCandidate]:
    if not hints.name_hint:
        return []
    name = _quoted(hints.name_hint)
    site = spec.name_site()
    company = hints.effective_company()
    title = hints.headline_title()

    planned: List[Tuple[str, Optional[str]]] = []
    if not spec.requires_company:
        planned.append(("name:full", None))
    if company:
        planned.append(("name+company", company))
    if hints.location_hint and not spec.requires_company:
        planned.append(("name+location", hints.location_hint))
    if title and not spec.requires_company:
        planned.append(("name+headline_title", title))

    candidates: List[QueryCandidate] = []
    for variant_id, anchor in planned:
        if len(candidates) >= max_queries:
            break
        terms = [name] + ([_quoted(anchor)] if anchor else [])
        query = _scoped(site, *terms, spec.extra_terms)
        candidates.append(QueryCandidate(query=query, mode="name", variant_id=variant_id))
    return candidates


def generate_query_candidates(
    spec: SourceSpec,
    hints: HintBundle,
    max_queries: int,
    config: Optional[DiscoveryConfig] = None,
) -> List[QueryCandidate]:
    """Ordered query candidates for one platform, at most ``max_queries`` long."""
    if max_queries < 1:
        return []
    config = config or DiscoveryConfig()
    if spec.query_mode == "handle":
        return _handle_queries(spec, hints, max_queries, config)
    return _name_queries(spec, hints, max_queries)


_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_CURLY = re.compile("[“”‘’–—]")
_QUOTED = re.compile(r'"([^"]+)"')


def should_normalize_query(query: str) -> bool:
    return bool(_NON_ASCII.search(query) or _CURLY.search(query))


def fold_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _normalize_quoted(match: re.Match) -> str:
    inner = match.group(1)
    inner = re.sub("[“”]", '"', inner)
    inner = re.sub("[‘’]", "'", inner)
    inner = re.sub("[-–—_.]+", " ", inner)
    inner = " ".join(inner.split())
    return f'"{inner}"'


def normalize_name_query(query: str) -> str:
    """Fold diacritics everywhere and punctuation inside quoted phrases only, so site: syntax survives."""
    return _QUOTED.sub(_normalize_quoted, fold_diacritics(query))
