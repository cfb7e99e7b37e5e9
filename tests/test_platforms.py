from __future__ import annotations

import pytest

from models.platform import PLATFORMS
from sources.catalog import SOURCE_CATALOG
from sources.platforms import PLATFORM_PATTERNS, extract_platform_id, get_pattern, profile_url


SAMPLE_IDS = {
    "github": "john-doe",
    "stackoverflow": "1234567",
    "npm": "jdoe",
    "pypi": "john.doe",
    "dockerhub": "johndoe",
    "leetcode": "john_doe",
    "hackerearth": "john.doe",
    "codepen": "johndoe",
    "gitlab": "john.doe",
    "gist": "johndoe",
    "kaggle": "johndoe",
    "huggingface": "john-doe",
    "paperswithcode": "john-doe",
    "openreview": "~John_Doe1",
    "orcid": "0000-0002-1825-009X",
    "scholar": "AbCdEf12345",
    "semanticscholar": "1741101",
    "researchgate": "John-Doe-3",
    "arxiv": "doe_j_1",
    "patents": "John Doe",
    "university": "https://cs.stanford.edu/people/jdoe",
    "sec": "1318605",
    "companyteam": "https://acme.com/team",
    "angellist": "john-doe",
    "crunchbase": "john-doe",
    "medium": "john.doe",
    "devto": "johndoe",
    "substack": "johndoe",
    "youtube": "JohnDoe",
    "twitter": "john_doe",
    "dribbble": "johndoe",
    "behance": "johndoe",
}


def test_every_platform_has_pattern_and_catalog_entry():
    assert set(PLATFORM_PATTERNS) == set(PLATFORMS)
    assert set(SOURCE_CATALOG) == set(PLATFORMS)
    assert set(SAMPLE_IDS) == set(PLATFORMS)


@pytest.mark.parametrize("platform", PLATFORMS)
def test_profile_url_round_trips(platform):
    platform_id = SAMPLE_IDS[platform]
    url = profile_url(platform, platform_id)
    assert extract_platform_id(platform, url) == platform_id


def test_base_weights_are_within_unit_interval():
    for spec in SOURCE_CATALOG.values():
        assert 0.0 <= spec.base_weight <= 1.0


@pytest.mark.parametrize(
    "platform,url,expected",
    [
        ("github", "https://github.com/john-doe?tab=repositories", "john-doe"),
        ("github", "https://github.com/orgs/acme", None),
        ("github", "https://gist.github.com/johndoe", None),
        ("gist", "https://gist.github.com/johndoe/abc123", "johndoe"),
        ("stackoverflow", "https://stackoverflow.com/users/22656/jon-skeet", "22656"),
        ("leetcode", "https://leetcode.com/problems/two-sum/", None),
        ("twitter", "https://x.com/john_doe/status/1", "john_doe"),
        ("semanticscholar", "https://www.semanticscholar.org/author/John-Doe/1741101", "1741101"),
        ("arxiv", "https://arxiv.org/abs/2101.00001", "2101.00001"),
        ("sec", "https://www.sec.gov/Archives/edgar/data/1318605/000156459021004599/0001564590-21-004599-index.htm",
         "1318605"),
        ("university", "https://cs.stanford.edu/people/jdoe/", "https://cs.stanford.edu/people/jdoe"),
        ("university", "https://example.com/people/jdoe", None),
        ("patents", "https://patents.google.com/?inventor=John+Doe&oq=x", "John Doe"),
    ],
)
def test_extract_platform_id(platform, url, expected):
    assert extract_platform_id(platform, url) == expected


def test_unknown_platform():
    with pytest.raises(KeyError):
        get_pattern("myspace")
    assert extract_platform_id("myspace", "https://myspace.com/x") is None
