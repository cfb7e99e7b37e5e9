from __future__ import annotations

from models.search import MatchedResult
from sources.profile_extraction import extract_profile, rules_for
from utils.number_parsing import parse_count


def _result(platform, url, title, snippet, platform_id="x"):
    return MatchedResult(
        url=url,
        title=title,
        snippet=snippet,
        position=1,
        platform=platform,
        platform_id=platform_id,
        profile_url=url,
    )


def test_github_title_and_counters():
    result = _result(
        "github",
        "https://github.com/johndoe",
        "johndoe (John Doe) · GitHub",
        "Backend engineer at Acme. 1.2k followers · 42 repositories. Based in Berlin",
    )
    profile = extract_profile(result, rules_for("github"))

    assert profile.name == "John Doe"
    assert profile.followers == 1200
    assert profile.public_repos == 42
    assert profile.company == "Acme"
    assert profile.location == "Berlin"
    assert profile.bio.startswith("Backend engineer")


def test_stackoverflow_reputation():
    result = _result(
        "stackoverflow",
        "https://stackoverflow.com/users/1/john",
        "User John Doe - Stack Overflow",
        "Reputation: 15,320 · Top 1% this year",
    )
    profile = extract_profile(result, rules_for("stackoverflow"))
    assert profile.name == "John Doe"
    assert profile.reputation == 15320


def test_orcid_strips_identifier_from_name():
    result = _result(
        "orcid",
        "https://orcid.org/0000-0002-1825-0097",
        "John Doe (0000-0002-1825-0097) - ORCID",
        "12 works",
    )
    profile = extract_profile(result, rules_for("orcid"))
    assert profile.name == "John Doe"
    assert profile.publications == 12


def test_company_team_uses_domain_label():
    result = _result(
        "companyteam",
        "https://www.acme.io/team",
        "Our Team",
        "Meet the people building the future",
    )
    profile = extract_profile(result, rules_for("companyteam"))
    assert profile.company == "acme"


def test_unknown_platform_uses_defaults():
    result = _result("github", "https://github.com/x", "Jane Roe", "")
    profile = extract_profile(result, rules_for("nonexistent"))
    assert profile.name == "Jane Roe"
    assert profile.bio is None
    assert profile.followers is None


def test_parse_count_shorthand():
    assert parse_count("1.2K") == 1200
    assert parse_count("1.2 k") == 1200
    assert parse_count("3M") == 3_000_000
    assert parse_count("4,500") == 4500
    assert parse_count("500+") == 500
    assert parse_count("n/a") is None
    assert parse_count(None) is None
