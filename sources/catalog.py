from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from models.platform import QueryMode


@dataclass(frozen=True)
class SourceSpec:
    """Static description of one platform as a discovery source.

    ``site_patterns`` are query prefixes: for handle-mode platforms the handle is
    appended directly (``site:github.com/`` + ``john-doe``); for name-mode
    platforms they scope a quoted name search. ``name_scope`` overrides the
    site scope used for name fallbacks of handle-mode platforms.
    """

    platform: str
    display_name: str
    base_weight: float
    query_mode: QueryMode
    site_patterns: Tuple[str, ...]
    roles: Tuple[str, ...] = ("general",)
    name_scope: Optional[str] = None
    extra_terms: str = ""
    requires_company: bool = False

    def name_site(self) -> str:
        if self.name_scope is not None:
            return self.name_scope
        return self.site_patterns[0].rstrip("/") if self.site_patterns else ""


def _handle(platform, display_name, base_weight, site, roles, name_scope=None) -> SourceSpec:
    patterns = site if isinstance(site, tuple) else (site,)
    return SourceSpec(platform, display_name, base_weight, "handle", patterns, roles, name_scope=name_scope)


def _name(platform, display_name, base_weight, scope, roles, **kwargs) -> SourceSpec:
    return SourceSpec(platform, display_name, base_weight, "name", (scope,) if scope else (), roles, **kwargs)


SOURCE_CATALOG: Dict[str, SourceSpec] = {
    s.platform: s
    for s in (
        # code / engineering
        _handle("github", "GitHub", 0.6, "site:github.com/", ("engineer", "data_scientist", "general")),
        _name("stackoverflow", "Stack Overflow", 0.15, "site:stackoverflow.com/users", ("engineer", "general")),
        _handle("npm", "npm", 0.2, "site:npmjs.com/~", ("engineer",), name_scope="site:npmjs.com"),
        _handle("pypi", "PyPI", 0.2, "site:pypi.org/user/", ("engineer", "data_scientist"), name_scope="site:pypi.org"),
        _handle("dockerhub", "Docker Hub", 0.15, "site:hub.docker.com/u/", ("engineer",)),
        _handle("leetcode", "LeetCode", 0.15, "site:leetcode.com/u/", ("engineer",), name_scope="site:leetcode.com"),
        _handle("hackerearth", "HackerEarth", 0.15, "site:hackerearth.com/@", ("engineer",),
                name_scope="site:hackerearth.com"),
        _handle("codepen", "CodePen", 0.15, "site:codepen.io/", ("designer", "engineer")),
        _handle("gitlab", "GitLab", 0.2, "site:gitlab.com/", ("engineer",)),
        _handle("gist", "GitHub Gist", 0.1, "site:gist.github.com/", ("engineer", "data_scientist")),
        # data science / ML
        _handle("kaggle", "Kaggle", 0.25, "site:kaggle.com/", ("data_scientist",)),
        _handle("huggingface", "Hugging Face", 0.25, "site:huggingface.co/", ("data_scientist", "researcher")),
        _name("paperswithcode", "Papers With Code", 0.45, "site:paperswithcode.com/author",
              ("data_scientist", "researcher")),
        _name("openreview", "OpenReview", 0.3, "site:openreview.net", ("researcher", "data_scientist")),
        # academic
        _name("orcid", "ORCID", 0.5, "site:orcid.org", ("researcher",)),
        _name("scholar", "Google Scholar", 0.25, "site:scholar.google.com", ("researcher", "data_scientist")),
        _name("semanticscholar", "Semantic Scholar", 0.2, "site:semanticscholar.org/author", ("researcher",)),
        _name("researchgate", "ResearchGate", 0.2, "site:researchgate.net/profile", ("researcher",)),
        _name("arxiv", "arXiv", 0.2, "site:arxiv.org", ("researcher", "data_scientist"), extra_terms="author"),
        _name("patents", "Google Patents", 0.4, "site:patents.google.com", ("researcher", "engineer", "founder"),
              extra_terms="inventor"),
        _name("university", "University Page", 0.35, "site:edu", ("researcher",)),
        # business / founder
        _name("sec", "SEC EDGAR", 0.5, "site:sec.gov", ("founder",)),
        _name("companyteam", "Company Team Page", 0.4, None, ("founder", "general"),
              extra_terms="(team OR leadership OR about)", requires_company=True),
        _name("angellist", "AngelList", 0.3, "site:angel.co/u", ("founder",)),
        _name("crunchbase", "Crunchbase", 0.35, "site:crunchbase.com/person", ("founder",)),
        # content
        _handle("medium", "Medium", 0.15, "site:medium.com/@", ("founder", "general"), name_scope="site:medium.com"),
        _handle("devto", "Dev.to", 0.15, "site:dev.to/", ("engineer",)),
        _name("substack", "Substack", 0.15, "site:substack.com", ("founder", "general")),
        _name("youtube", "YouTube", 0.2, "site:youtube.com", ("founder", "researcher")),
        _handle("twitter", "Twitter/X", 0.15, "site:twitter.com/", ("founder", "general", "designer")),
        # design
        _handle("dribbble", "Dribbble", 0.15, "site:dribbble.com/", ("designer",)),
        _handle("behance", "Behance", 0.15, "site:behance.net/", ("designer",)),
    )
}


def get_source_spec(platform: str) -> SourceSpec:
    if platform not in SOURCE_CATALOG:
        raise KeyError(f"Unknown platform: {platform}")
    return SOURCE_CATALOG[platform]


def platforms_for_role(role_type: str) -> list[str]:
    return [p for p, s in SOURCE_CATALOG.items() if role_type in s.roles]
