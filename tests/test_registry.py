from __future__ import annotations

import pytest

from sources.base import DiscoverySource
from sources.catalog import SOURCE_CATALOG, get_source_spec, platforms_for_role
from sources.registry import SourceRegistry, build_default_registry


def test_default_registry_has_every_platform():
    registry = build_default_registry(executor=None)
    assert len(registry) == len(SOURCE_CATALOG)
    assert registry.available_sources() == list(SOURCE_CATALOG)

    github = registry.get_source("github")
    assert isinstance(github, DiscoverySource)
    assert github.display_name == "GitHub"
    assert github.base_weight == 0.6


def test_unknown_source_raises():
    registry = SourceRegistry()
    with pytest.raises(KeyError):
        registry.get_source("does_not_exist")
    assert "github" not in registry


def test_register_replaces_by_platform():
    registry = SourceRegistry()
    registry.register(DiscoverySource(get_source_spec("github"), executor=None))
    registry.register(DiscoverySource(get_source_spec("github"), executor=None))
    assert registry.available_sources() == ["github"]


def test_unknown_spec_raises():
    with pytest.raises(KeyError):
        get_source_spec("myspace")


def test_platforms_for_role():
    assert "orcid" in platforms_for_role("researcher")
    assert "github" in platforms_for_role("engineer")


def test_source_without_executor_reports_healthy():
    source = DiscoverySource(get_source_spec("orcid"), executor=None)
    assert source.health_check().healthy is True


def test_source_delegates_health_to_executor(fakes):
    from services.search_executor import SearchExecutor

    executor = SearchExecutor(fakes["provider"]("serper", healthy=False))
    source = DiscoverySource(get_source_spec("github"), executor)
    assert source.health_check().healthy is False
