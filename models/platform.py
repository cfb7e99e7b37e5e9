from __future__ import annotations

from typing import Literal, get_args


Platform = Literal[
    # code / engineering
    "github",
    "stackoverflow",
    "npm",
    "pypi",
    "dockerhub",
    "leetcode",
    "hackerearth",
    "codepen",
    "gitlab",
    "gist",
    # data science / ML
    "kaggle",
    "huggingface",
    "paperswithcode",
    "openreview",
    # academic
    "orcid",
    "scholar",
    "semanticscholar",
    "researchgate",
    "arxiv",
    "patents",
    "university",
    # business / founder
    "sec",
    "companyteam",
    "angellist",
    "crunchbase",
    # content
    "medium",
    "devto",
    "substack",
    "youtube",
    "twitter",
    # design
    "dribbble",
    "behance",
]

PLATFORMS: tuple[str, ...] = get_args(Platform)

RoleType = Literal["engineer", "data_scientist", "researcher", "founder", "designer", "general"]

QueryMode = Literal["handle", "name"]

ConfidenceBucket = Literal["auto_merge", "suggest", "low", "rejected"]

SourceStatus = Literal["completed", "no_queries", "skipped", "error"]
