from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from models.identity import PlatformProfile
from models.search import MatchedResult
from services.domain_utils import apex_label
from utils.number_parsing import first_count


def _rx(*patterns: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


_COUNT = r"(\d[\d,]*(?:\.\d+)?\s?[KkMm]?)"

# Keyword is case-insensitive, the captured name must start upper-case
DEFAULT_COMPANY = (
    re.compile(r"(?i:works at|working at|employed at|\bat)\s+([A-Z][\w&.'-]*(?: [A-Z&][\w&.'-]*)*)"),
)
DEFAULT_LOCATION = (
    re.compile(r"(?i:based in|located in|lives in|living in|\bfrom)\s+([A-Z][\w'-]*(?:,? [A-Z][\w'-]*)*)"),
)


@dataclass(frozen=True)
class ProfileRules:
    """How to read a platform's search-result title and snippet."""

    title_suffix: Optional[str] = None
    title_prefix: Optional[str] = None
    name_pattern: Optional[str] = None
    followers: Tuple[re.Pattern, ...] = ()
    reputation: Tuple[re.Pattern, ...] = ()
    public_repos: Tuple[re.Pattern, ...] = ()
    publications: Tuple[re.Pattern, ...] = ()
    company: Tuple[re.Pattern, ...] = DEFAULT_COMPANY
    location: Tuple[re.Pattern, ...] = DEFAULT_LOCATION
    company_from_domain: bool = False


_NAME_SEPARATORS = re.compile(r"\s+[-|·–—]\s+")


def _first_text(patterns: Tuple[re.Pattern, ...], text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            value = m.group(1).strip(" .,;:·|")
            if value:
                return value
    return None


def _first_number(patterns: Tuple[re.Pattern, ...], text: Optional[str]) -> Optional[int]:
    for pattern in patterns:
        value = first_count(pattern, text)
        if value is not None:
            return value
    return None


def _extract_name(title: str, rules: ProfileRules) -> Optional[str]:
    text = (title or "").strip()
    if rules.title_suffix:
        text = re.sub(rules.title_suffix, "", text, flags=re.IGNORECASE).strip()
    if rules.title_prefix:
        text = re.sub(rules.title_prefix, "", text, flags=re.IGNORECASE).strip()
    if rules.name_pattern:
        m = re.search(rules.name_pattern, text, flags=re.IGNORECASE)
        if m and m.group(1).strip():
            text = m.group(1)
    name = _NAME_SEPARATORS.split(text, maxsplit=1)[0].strip()
    name = re.sub(r"'s (?:profile|page)$", "", name, flags=re.IGNORECASE).strip()
    # Trailing identifiers such as "(0000-0002-1825-0097)"
    name = re.sub(r"\s*\([^)]*\d[^)]*\)$", "", name).strip()
    if name.startswith("@"):
        name = name[1:]
    return name or None


_IDENTIFIER_ONLY = re.compile(r"^[\dX\s-]+$")
_LEADING_NAME = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)")


def extract_profile(result: MatchedResult, rules: Optional[ProfileRules] = None) -> PlatformProfile:
    rules = rules or ProfileRules()
    snippet = result.snippet or None

    company = _first_text(rules.company, snippet)
    if not company and rules.company_from_domain:
        company = apex_label(result.url)

    name = _extract_name(result.title, rules)
    if (not name or _IDENTIFIER_ONLY.match(name)) and snippet:
        m = _LEADING_NAME.match(snippet)
        name = m.group(1) if m else name

    return PlatformProfile(
        name=name,
        bio=snippet,
        company=company,
        location=_first_text(rules.location, snippet),
        followers=_first_number(rules.followers, snippet),
        reputation=_first_number(rules.reputation, snippet),
        public_repos=_first_number(rules.public_repos, snippet),
        publications=_first_number(rules.publications, snippet),
    )


_FOLLOWERS = _rx(_COUNT + r"\s*followers?")
_PUBLICATIONS = _rx(r"(\d[\d,]*)\s*(?:works?|publications?|papers?|articles?)")

PROFILE_RULES: Dict[str, ProfileRules] = {
    "github": ProfileRules(
        title_suffix=r"\s*[·|-]\s*GitHub.*$",
        name_pattern=r"^[\w.-]+\s+\(([^)]+)\)",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*(?:public\s+)?repositor(?:y|ies)"),
    ),
    "gist": ProfileRules(title_suffix=r"(?:'s gists)?\s*[·|-]\s*GitHub.*$", followers=_FOLLOWERS),
    "stackoverflow": ProfileRules(
        title_suffix=r"\s*[-|]\s*Stack Overflow.*$",
        title_prefix=r"^User\s+",
        reputation=_rx(r"reputation[:\s]+" + _COUNT, _COUNT + r"\s*reputation"),
    ),
    "npm": ProfileRules(
        title_suffix=r"\s*[-|]\s*npm.*$",
        public_repos=_rx(r"(\d[\d,]*)\s*packages?"),
    ),
    "pypi": ProfileRules(
        title_suffix=r"\s*[·|-]\s*PyPI.*$",
        title_prefix=r"^Profile of\s+",
        public_repos=_rx(r"(\d[\d,]*)\s*projects?"),
    ),
    "dockerhub": ProfileRules(
        title_suffix=r"\s*[|·-]\s*Docker Hub.*$",
        public_repos=_rx(r"(\d[\d,]*)\s*(?:images?|repositories)"),
        reputation=_rx(_COUNT + r"\s*pulls?"),
    ),
    "leetcode": ProfileRules(
        title_suffix=r"\s*[-·]\s*LeetCode.*$",
        reputation=_rx(r"(?:rating|rank(?:ing)?)[:\s]+" + _COUNT),
        public_repos=_rx(r"(\d[\d,]*)\s*(?:problems?\s*solved|solved)"),
    ),
    "hackerearth": ProfileRules(title_suffix=r"\s*[|-]\s*HackerEarth.*$", followers=_FOLLOWERS),
    "codepen": ProfileRules(
        title_suffix=r"\s*(?:on)?\s*CodePen.*$",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*pens?"),
    ),
    "gitlab": ProfileRules(
        title_suffix=r"\s*·\s*GitLab.*$",
        name_pattern=r"^([^(@]+?)\s*\(@",
        public_repos=_rx(r"(\d[\d,]*)\s*(?:projects?|repositories)"),
    ),
    "kaggle": ProfileRules(
        title_suffix=r"\s*[|-]\s*(?:Kaggle|Grandmaster|Master|Expert|Contributor).*$",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*(?:notebooks?|datasets?|competitions?)"),
    ),
    "huggingface": ProfileRules(
        title_suffix=r"\s*[-|]\s*Hugging ?Face.*$",
        name_pattern=r"^([^(]+?)\s*\(",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*(?:models?|spaces?)"),
    ),
    "paperswithcode": ProfileRules(title_suffix=r"\s*[|-]\s*Papers With Code.*$", publications=_PUBLICATIONS),
    "openreview": ProfileRules(title_suffix=r"\s*[|-]\s*OpenReview.*$", publications=_PUBLICATIONS),
    "orcid": ProfileRules(
        title_suffix=r"\s*[-·(]\s*ORCID.*$",
        company=_rx(r"(?:affiliated with|works at|\bat)\s+([^.·;]+)"),
        publications=_PUBLICATIONS,
    ),
    "scholar": ProfileRules(
        title_suffix=r"\s*[-·]\s*Google Scholar.*$",
        company=_rx(r"(?:Professor|Researcher|Scientist|Engineer|Student)\s+(?:at|,)\s+([^.·,]+)"),
        reputation=_rx(r"Cited by\s*" + _COUNT),
        publications=_PUBLICATIONS,
    ),
    "semanticscholar": ProfileRules(
        title_suffix=r"\s*[|·-]\s*Semantic Scholar.*$",
        reputation=_rx(_COUNT + r"\s*citations?"),
        publications=_rx(r"(\d[\d,]*)\s*(?:papers?|publications?)"),
    ),
    "researchgate": ProfileRules(
        title_suffix=r"\s*[|-]\s*(?:ResearchGate|\S+ University).*$",
        company=_rx(r"(?:\bat|works at)\s+([^.·;|]+)"),
        reputation=_rx(_COUNT + r"\s*citations?"),
        publications=_rx(r"(\d[\d,]*)\s*(?:publications?|research items?)"),
    ),
    "arxiv": ProfileRules(title_suffix=r"\s*[|-]\s*arXiv.*$", title_prefix=r"^\[[\w./-]+\]\s*", publications=_PUBLICATIONS),
    "patents": ProfileRules(
        title_suffix=r"\s*[-|]\s*Google Patents.*$",
        company=_rx(r"(?:assignee|assigned to)[:\s]+([^.·;]+)"),
    ),
    "university": ProfileRules(
        title_suffix=r"\s*[|-]\s*.*(?:University|College|Institute|School).*$",
        publications=_PUBLICATIONS,
    ),
    "sec": ProfileRules(
        title_suffix=r"\s*[|-]\s*(?:SEC|EDGAR).*$",
        company=_rx(r"(?:officer|director|chief executive officer|ceo|president) (?:of|at)\s+([^.·;,]+)"),
    ),
    "companyteam": ProfileRules(company_from_domain=True),
    "angellist": ProfileRules(title_suffix=r"\s*[-|]\s*(?:AngelList|Wellfound).*$", followers=_FOLLOWERS),
    "crunchbase": ProfileRules(
        title_suffix=r"\s*[-|]\s*(?:Crunchbase|Person Profile).*$",
        company=_rx(r"(?:founder|co-founder|ceo|cto|partner)(?: and \w+)? (?:of|at)\s+([^.·;,]+)"),
    ),
    "medium": ProfileRules(title_suffix=r"\s*[–·-]\s*Medium.*$", followers=_FOLLOWERS),
    "devto": ProfileRules(
        title_suffix=r"\s*[-·]\s*DEV(?: Community)?.*$",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*(?:posts?|articles?)"),
    ),
    "substack": ProfileRules(title_suffix=r"\s*[|-]\s*Substack.*$", followers=_rx(_COUNT + r"\s*subscribers?")),
    "youtube": ProfileRules(title_suffix=r"\s*[-|]\s*YouTube.*$", followers=_rx(_COUNT + r"\s*subscribers?")),
    "twitter": ProfileRules(
        name_pattern=r"^([^(@]+?)\s*(?:\(@|/\s*X|on X)",
        followers=_FOLLOWERS,
        location=_rx("\U0001F4CD\\s*([^·|\\n]+)") + DEFAULT_LOCATION,
    ),
    "dribbble": ProfileRules(title_suffix=r"\s*[|-]\s*Dribbble.*$", followers=_FOLLOWERS),
    "behance": ProfileRules(
        title_suffix=r"\s*(?:on)?\s*[|:-]?\s*Behance.*$",
        followers=_FOLLOWERS,
        public_repos=_rx(r"(\d[\d,]*)\s*projects?"),
    ),
}


def rules_for(platform: str) -> ProfileRules:
    return PROFILE_RULES.get(platform) or ProfileRules()
