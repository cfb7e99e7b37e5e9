from __future__ import annotations


# Central routing for discovery. Edit here to change which platforms are tried
# for a role, and in which order.
#
# Keys are role types carried on HintBundle.role_type; unknown roles use "general".
ROLE_SOURCE_PRIORITY: dict[str, list[str]] = {
    "engineer": [
        "github",
        "stackoverflow",
        "npm",
        "pypi",
        "leetcode",
        "hackerearth",
        "gitlab",
        "dockerhub",
        "codepen",
        "gist",
        "devto",
    ],
    "data_scientist": [
        "github",
        "kaggle",
        "huggingface",
        "paperswithcode",
        "openreview",
        "scholar",
        "gist",
        "stackoverflow",
    ],
    "researcher": [
        "orcid",
        "scholar",
        "semanticscholar",
        "openreview",
        "researchgate",
        "arxiv",
        "patents",
        "university",
        "github",
    ],
    "designer": ["dribbble", "behance", "github", "codepen", "twitter", "medium"],
    "founder": [
        "sec",
        "crunchbase",
        "angellist",
        "companyteam",
        "github",
        "twitter",
        "medium",
        "youtube",
        "substack",
    ],
    "general": ["github", "stackoverflow", "twitter", "medium", "companyteam"],
}

ROLE_TYPES: tuple[str, ...] = tuple(ROLE_SOURCE_PRIORITY.keys())

# Frequently blocked or rate-limited by search engines
DEFAULT_UNRELIABLE_PLATFORMS: frozenset[str] = frozenset({"crunchbase", "angellist"})


def platform_priorities(role_type: str | None) -> list[str]:
    return list(ROLE_SOURCE_PRIORITY.get(role_type or "general") or ROLE_SOURCE_PRIORITY["general"])
