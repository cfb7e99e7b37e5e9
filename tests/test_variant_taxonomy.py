from __future__ import annotations

from sources.variant_taxonomy import aggregate_by_canonical, build_variant_stats, canonicalize_variant


def test_known_variants():
    assert canonicalize_variant("handle:clean") == "handle:primary"
    assert canonicalize_variant("handle:collapsed") == "handle:derived"
    assert canonicalize_variant("name+company") == "name:full+company"
    assert canonicalize_variant("name+headline_title") == "name:full+title"


def test_fallback_rules():
    assert canonicalize_variant("name:full_folded") == "name:full"
    assert canonicalize_variant("name+location_folded") == "name:full+location"
    assert canonicalize_variant("handle:something_new") == "handle:derived"
    assert canonicalize_variant("mystery") == "name:full"


def test_aggregate_and_stats():
    counts = aggregate_by_canonical(["handle:clean", "handle:stripped", "handle:dot", "name:full"])
    assert counts["handle:primary"] == 1
    assert counts["handle:derived"] == 2
    assert counts["name:full"] == 1
    assert counts["name:full+title"] == 0

    stats = build_variant_stats(["handle:clean"], ["name:full"])
    assert stats["executed"]["raw"] == ["handle:clean"]
    assert stats["rejected"]["canonical"]["name:full"] == 1
