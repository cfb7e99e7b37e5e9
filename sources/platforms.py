"""Platform patterns: URL matcher, ID extractor and profile-URL builder per platform.

Each triple is the canonical identity contract of a platform and round-trips:
``extract_id(build_url(pid)) == pid`` for any syntactically valid ``pid``.
Page-shaped platforms (university, companyteam) use the canonical page URL
itself as the identifier.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional
from urllib.parse import quote, unquote, unquote_plus, urlparse

from services.domain_utils import canonical_page_url


def _host(domain: str) -> str:
    # Exact host, optionally www-prefixed; rejects sub-hosts like gist.github.com for github.com
    return r"(?<![\w.-])(?:www\.)?" + domain


@dataclass(frozen=True)
class PlatformPattern:
    platform: str
    url_pattern: re.Pattern
    extract: Callable[[str], Optional[str]]
    build: Callable[[str], str]
    reserved: FrozenSet[str] = field(default_factory=frozenset)

    def matches(self, url: str) -> bool:
        return bool(url) and bool(self.url_pattern.search(url))

    def extract_id(self, url: str) -> Optional[str]:
        if not self.matches(url):
            return None
        platform_id = self.extract(url)
        if not platform_id or platform_id.lower() in self.reserved:
            return None
        return platform_id

    def build_profile_url(self, platform_id: str) -> str:
        return self.build(platform_id)


def _slug(platform: str, regex: str, template: str, reserved: tuple[str, ...] = ()) -> PlatformPattern:
    pattern = re.compile(regex, re.IGNORECASE)

    def _extract(url: str) -> Optional[str]:
        m = pattern.search(url)
        return m.group(1) if m else None

    return PlatformPattern(
        platform=platform,
        url_pattern=pattern,
        extract=_extract,
        build=lambda pid: template.format(id=pid),
        reserved=frozenset(reserved),
    )


_OPENREVIEW_RE = re.compile(_host(r"openreview\.net") + r"/profile\?id=([^&#\s]+)", re.IGNORECASE)


def _openreview_id(url: str) -> Optional[str]:
    m = _OPENREVIEW_RE.search(url)
    return unquote(m.group(1)) if m else None


_ARXIV_RE = re.compile(_host(r"arxiv\.org") + r"/(?:abs|pdf|list|search|a)/([\w.-]+)", re.IGNORECASE)
_ARXIV_ABS_RE = re.compile(r"arxiv\.org/abs/([0-9.]+)", re.IGNORECASE)
_ARXIV_AUTHOR_RE = re.compile(r"arxiv\.org/a/([\w.-]+)", re.IGNORECASE)


def _arxiv_id(url: str) -> Optional[str]:
    for regex in (_ARXIV_ABS_RE, _ARXIV_AUTHOR_RE, _ARXIV_RE):
        m = regex.search(url)
        if m:
            return m.group(1)
    return None


_PATENTS_RE = re.compile(_host(r"patents\.google\.com"), re.IGNORECASE)
_PATENT_INVENTOR_RE = re.compile(r"[?&]inventor=([^&#]+)")
_PATENT_NUMBER_RE = re.compile(r"patents\.google\.com/patent/([A-Z0-9]+)", re.IGNORECASE)


def _patents_id(url: str) -> Optional[str]:
    m = _PATENT_INVENTOR_RE.search(url)
    if m:
        return unquote_plus(m.group(1))
    m = _PATENT_NUMBER_RE.search(url)
    if m:
        return m.group(1)
    segments = [s for s in urlparse(url).path.split("/") if s]
    return segments[-1] if segments else None


_SEC_RE = re.compile(r"(?<![\w-])(?:[\w-]+\.)*sec\.gov", re.IGNORECASE)
_SEC_CIK_RE = re.compile(r"CIK=([0-9]+)", re.IGNORECASE)
_SEC_ARCHIVE_RE = re.compile(r"Archives/edgar/data/([0-9]+)", re.IGNORECASE)


def _sec_id(url: str) -> Optional[str]:
    for regex in (_SEC_CIK_RE, _SEC_ARCHIVE_RE):
        m = regex.search(url)
        if m:
            return m.group(1)
    for segment in urlparse(url).path.split("/"):
        if segment.isdigit():
            return segment
    return None


_UNIVERSITY_RE = re.compile(r"(?:\.edu|\.ac\.uk)(?::\d+)?/", re.IGNORECASE)
_COMPANY_TEAM_RE = re.compile(
    r"/(?:team|about|people|leadership|staff|our-team|meet-the-team|company|who-we-are)(?:[/?#]|$)",
    re.IGNORECASE,
)


def _page_id(url: str) -> Optional[str]:
    return canonical_page_url(url)


def _page_url(page_id: str) -> str:
    return page_id


PLATFORM_PATTERNS: Dict[str, PlatformPattern] = {
    p.platform: p
    for p in (
        _slug(
            "github",
            _host(r"github\.com") + r"/([a-z0-9_-]+)(?:[/?#]|$)",
            "https://github.com/{id}",
            reserved=("orgs", "topics", "features", "about", "pricing", "sponsors", "marketplace", "search",
                      "settings", "login", "join", "explore", "collections", "trending", "enterprise", "apps"),
        ),
        _slug("stackoverflow", _host(r"stackoverflow\.com") + r"/users/(\d+)", "https://stackoverflow.com/users/{id}"),
        _slug("npm", _host(r"npmjs\.com") + r"/~([a-z0-9_.-]+)", "https://www.npmjs.com/~{id}"),
        _slug("pypi", _host(r"pypi\.org") + r"/user/([a-z0-9_.-]+)", "https://pypi.org/user/{id}/"),
        _slug("dockerhub", _host(r"hub\.docker\.com") + r"/[ur]/([a-z0-9_-]+)", "https://hub.docker.com/u/{id}"),
        _slug(
            "leetcode",
            _host(r"leetcode\.com") + r"/(?:u/)?([a-z0-9_-]+)",
            "https://leetcode.com/u/{id}",
            reserved=("problems", "problemset", "contest", "discuss", "explore", "studyplan", "tag", "company",
                      "accounts", "u"),
        ),
        _slug(
            "hackerearth",
            _host(r"hackerearth\.com") + r"/(?:@|users/|people/)([a-z0-9_.-]+)",
            "https://www.hackerearth.com/@{id}",
        ),
        _slug(
            "codepen",
            _host(r"codepen\.io") + r"/([a-z0-9_-]+)",
            "https://codepen.io/{id}",
            reserved=("pen", "search", "trending", "challenges", "topics", "spark", "features", "login"),
        ),
        _slug(
            "gitlab",
            _host(r"gitlab\.com") + r"/(?:users/)?([a-z0-9_.-]+)",
            "https://gitlab.com/{id}",
            reserved=("groups", "explore", "help", "projects", "dashboard", "users", "-", "search"),
        ),
        _slug("gist", _host(r"gist\.github\.com") + r"/([a-z0-9_-]+)", "https://gist.github.com/{id}",
              reserved=("discover", "search", "starred")),
        _slug(
            "kaggle",
            _host(r"kaggle\.com") + r"/([a-z0-9_-]+)",
            "https://www.kaggle.com/{id}",
            reserved=("competitions", "datasets", "code", "discussions", "discussion", "learn", "models", "c",
                      "docs", "search", "rankings"),
        ),
        _slug(
            "huggingface",
            _host(r"huggingface\.co") + r"/([a-z0-9_-]+)",
            "https://huggingface.co/{id}",
            reserved=("datasets", "spaces", "models", "docs", "blog", "papers", "learn", "tasks", "search",
                      "organizations", "pricing"),
        ),
        _slug("paperswithcode", _host(r"paperswithcode\.com") + r"/author/([a-z0-9_-]+)",
              "https://paperswithcode.com/author/{id}"),
        PlatformPattern(
            platform="openreview",
            url_pattern=_OPENREVIEW_RE,
            extract=_openreview_id,
            build=lambda pid: f"https://openreview.net/profile?id={quote(pid, safe='')}",
        ),
        _slug("orcid", _host(r"orcid\.org") + r"/(\d{4}-\d{4}-\d{4}-\d{3}[\dX])", "https://orcid.org/{id}"),
        _slug("scholar", _host(r"scholar\.google\.[a-z.]+") + r"/citations\?(?:[^#\s]*&)?user=([a-z0-9_-]+)",
              "https://scholar.google.com/citations?user={id}"),
        _slug("semanticscholar", _host(r"semanticscholar\.org") + r"/author/(?:[^/?#\s]+/)?(\d+)",
              "https://www.semanticscholar.org/author/{id}"),
        _slug("researchgate", _host(r"researchgate\.net") + r"/profile/([a-z0-9_-]+)",
              "https://www.researchgate.net/profile/{id}"),
        PlatformPattern(
            platform="arxiv",
            url_pattern=_ARXIV_RE,
            extract=_arxiv_id,
            build=lambda pid: f"https://arxiv.org/a/{pid}",
        ),
        PlatformPattern(
            platform="patents",
            url_pattern=_PATENTS_RE,
            extract=_patents_id,
            build=lambda pid: f"https://patents.google.com/?inventor={quote(pid, safe='')}",
        ),
        PlatformPattern(platform="university", url_pattern=_UNIVERSITY_RE, extract=_page_id, build=_page_url),
        PlatformPattern(platform="sec", url_pattern=_SEC_RE, extract=_sec_id,
                        build=lambda pid: f"https://www.sec.gov/cgi-bin/browse-edgar?action=getcompany&CIK={pid}"),
        PlatformPattern(platform="companyteam", url_pattern=_COMPANY_TEAM_RE, extract=_page_id, build=_page_url),
        _slug("angellist", _host(r"(?:angel\.co|wellfound\.com)") + r"/u/([a-z0-9_-]+)", "https://angel.co/u/{id}"),
        _slug("crunchbase", _host(r"crunchbase\.com") + r"/person/([a-z0-9_-]+)",
              "https://www.crunchbase.com/person/{id}"),
        _slug("medium", _host(r"medium\.com") + r"/@([a-z0-9_.-]+)", "https://medium.com/@{id}"),
        _slug(
            "devto",
            _host(r"dev\.to") + r"/([a-z0-9_-]+)",
            "https://dev.to/{id}",
            reserved=("t", "search", "top", "latest", "enter", "new", "settings", "about", "tags"),
        ),
        _slug("substack", r"(?<![\w.-])([a-z0-9_-]+)\.substack\.com", "https://{id}.substack.com",
              reserved=("www", "on", "open", "support")),
        _slug("youtube", _host(r"(?:m\.)?youtube\.com") + r"/(?:@|channel/|c/)([a-z0-9_-]+)",
              "https://www.youtube.com/@{id}"),
        _slug(
            "twitter",
            _host(r"(?:twitter|x)\.com") + r"/([a-z0-9_]+)",
            "https://twitter.com/{id}",
            reserved=("home", "search", "intent", "share", "i", "hashtag", "explore", "settings", "login",
                      "signup", "tos", "privacy"),
        ),
        _slug(
            "dribbble",
            _host(r"dribbble\.com") + r"/([a-z0-9_-]+)",
            "https://dribbble.com/{id}",
            reserved=("shots", "tags", "search", "jobs", "designers", "stories", "session", "signup"),
        ),
        _slug(
            "behance",
            _host(r"behance\.net") + r"/([a-z0-9_-]+)",
            "https://www.behance.net/{id}",
            reserved=("gallery", "galleries", "search", "joblist", "assets", "hire", "onboarding"),
        ),
    )
}


def get_pattern(platform: str) -> PlatformPattern:
    if platform not in PLATFORM_PATTERNS:
        raise KeyError(f"Unknown platform: {platform}")
    return PLATFORM_PATTERNS[platform]


def extract_platform_id(platform: str, url: str) -> Optional[str]:
    pattern = PLATFORM_PATTERNS.get(platform)
    return pattern.extract_id(url) if pattern else None


def profile_url(platform: str, platform_id: str) -> str:
    return get_pattern(platform).build_profile_url(platform_id)


def matches_platform(platform: str, url: str) -> bool:
    pattern = PLATFORM_PATTERNS.get(platform)
    return pattern.matches(url) if pattern else False
