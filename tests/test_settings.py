from __future__ import annotations

import pytest

from config.discovery import DiscoveryConfig, HandleVariantWeights
from config.settings import get_settings


def test_defaults(monkeypatch):
    for var in ("SEARCH_PROVIDER", "SEARCH_FALLBACK_PROVIDER", "UNRELIABLE_PLATFORMS", "DISCOVERY_MAX_QUERIES"):
        monkeypatch.delenv(var, raising=False)
    settings = get_settings()
    assert settings.search_provider == "serper"
    assert settings.search_fallback_provider == "brave"
    assert settings.discovery_max_queries == 3
    assert settings.unreliable_platforms == ["crunchbase", "angellist"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SEARCH_FALLBACK_PROVIDER", "none")
    monkeypatch.setenv("UNRELIABLE_PLATFORMS", " Crunchbase , sec ")
    monkeypatch.setenv("SKIP_UNRELIABLE_PLATFORMS", "yes")
    monkeypatch.setenv("DISCOVERY_MAX_SOURCES", "7")
    settings = get_settings()
    assert settings.search_fallback_provider is None
    assert settings.unreliable_platforms == ["crunchbase", "sec"]
    assert settings.skip_unreliable_platforms is True

    config = DiscoveryConfig.from_settings(settings, max_queries=5, parallelism=None)
    assert config.max_sources == 7
    assert config.max_queries == 5
    assert config.parallelism == settings.discovery_parallelism
    assert config.unreliable_platforms == frozenset({"crunchbase", "sec"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_sources": 0},
        {"parallelism": 0},
        {"max_queries": 0},
        {"min_confidence": 1.5},
        {"early_stop_confidence": 0.0},
        {"provider_mode": "roundrobin"},
        {"unreliable_platforms": ["myspace"]},
        {"platform_weights": {"github": 2.0}},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        DiscoveryConfig(**kwargs)


def test_platform_weight_override():
    config = DiscoveryConfig(platform_weights={"github": 0.9})
    assert config.base_weight_for("github", 0.6) == 0.9
    assert config.base_weight_for("orcid", 0.5) == 0.5


def test_handle_weights_bounded():
    with pytest.raises(ValueError):
        HandleVariantWeights(verbatim=1.2)
