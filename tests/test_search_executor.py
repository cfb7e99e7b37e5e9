from __future__ import annotations

from models.search import RawSearchResult
from services.search_executor import SearchExecutor, is_rate_limited_error, merge_raw_results
from services.search_providers import ProviderError, RateLimitError


def _hit(url, position):
    return RawSearchResult(url=url, title=url.rsplit("/", 1)[-1], position=position)


def test_merge_keeps_lowest_position_and_sorts():
    a = [_hit("https://github.com/a", 1), _hit("https://github.com/b", 3)]
    b = [_hit("https://GitHub.com/b", 2), _hit("https://github.com/c", 4)]
    merged = merge_raw_results(a, b)
    assert [r.position for r in merged] == [1, 2, 4]
    assert merged[1].url == "https://GitHub.com/b"
    assert len(merge_raw_results(a, b, max_results=2)) == 2


def test_single_provider_passthrough(fakes):
    provider = fakes["provider"]("serper", default=[_hit("https://github.com/a", 1)])
    response = SearchExecutor(provider).search_raw("q", 5)
    assert response.provider == "serper"
    assert len(response.results) == 1


def test_merge_mode_labels_both_providers(fakes):
    primary = fakes["provider"]("serper", default=[_hit("https://github.com/a", 1)])
    fallback = fakes["provider"]("brave", default=[_hit("https://github.com/b", 1), _hit("https://github.com/a", 2)])
    response = SearchExecutor(primary, fallback, mode="merge").search_raw("q", 5)

    assert response.provider == "merged:serper+brave"
    assert {r.url for r in response.results} == {"https://github.com/a", "https://github.com/b"}
    assert len(primary.calls) == 1 and len(fallback.calls) == 1


def test_merge_mode_survives_one_failure(fakes):
    primary = fakes["provider"]("serper", default=ProviderError("boom", status=500))
    fallback = fakes["provider"]("brave", default=[_hit("https://github.com/b", 1)])
    response = SearchExecutor(primary, fallback, mode="merge").search_raw("q", 5)

    assert response.provider == "brave"
    assert response.error is None
    assert len(response.results) == 1


def test_sequential_skips_fallback_when_primary_has_enough(fakes):
    primary = fakes["provider"]("serper", default=[_hit("https://github.com/a", 1)])
    fallback = fakes["provider"]("brave", default=[_hit("https://github.com/b", 1)])
    response = SearchExecutor(primary, fallback, mode="sequential").search_raw("q", 5)

    assert response.provider == "serper"
    assert fallback.calls == []


def test_sequential_uses_fallback_when_primary_empty(fakes):
    primary = fakes["provider"]("serper")
    fallback = fakes["provider"]("brave", default=[_hit("https://github.com/b", 1)])
    response = SearchExecutor(primary, fallback, mode="sequential").search_raw("q", 5)

    assert response.provider == "brave"
    assert len(fallback.calls) == 1


def test_errors_are_reported_not_raised(fakes):
    provider = fakes["provider"]("serper", default=RateLimitError("slow down", status=429))
    response = SearchExecutor(provider).search_raw("q", 5)
    assert response.results == []
    assert response.rate_limited is True
    assert "slow down" in response.error


def test_execute_matches_platform_and_dedups(fakes):
    hits = [
        _hit("https://github.com/johndoe", 1),
        _hit("https://github.com/JohnDoe?tab=repositories", 2),
        _hit("https://example.com/blog/post?x=1", 3),
        _hit("https://github.com/orgs/acme", 4),
        _hit("https://github.com/jdoe", 5),
    ]
    provider = fakes["provider"]("serper", default=hits)
    outcome = SearchExecutor(provider).execute("github", "q", 5)

    assert [r.platform_id for r in outcome.results] == ["johndoe", "jdoe"]
    assert outcome.results[0].profile_url == "https://github.com/johndoe"
    assert outcome.raw_result_count == 5
    assert outcome.matched_result_count == 3
    assert outcome.unmatched_sample_urls == ["https://example.com/blog/post", "https://github.com/orgs/acme"]
    # execute over-fetches to leave room for unmatched hits
    assert provider.calls == [("q", 10)]


def test_execute_truncates_to_max_results(fakes):
    hits = [_hit(f"https://github.com/user{i}", i) for i in range(1, 8)]
    outcome = SearchExecutor(fakes["provider"]("serper", default=hits)).execute("github", "q", 3)
    assert len(outcome.results) == 3


def test_health_check_first_healthy(fakes):
    down = fakes["provider"]("serper", healthy=False)
    up = fakes["provider"]("brave")
    assert SearchExecutor(down, up).health_check().healthy is True
    status = SearchExecutor(down).health_check()
    assert status.healthy is False
    assert status.error == "down"


def test_rate_limit_detection():
    assert is_rate_limited_error(RateLimitError("x", status=503))
    assert is_rate_limited_error(RuntimeError("HTTP 429 Too Many Requests"))
    assert not is_rate_limited_error(RuntimeError("bad gateway"))
    assert not is_rate_limited_error(None)
