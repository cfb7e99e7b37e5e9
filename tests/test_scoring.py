from __future__ import annotations

import pytest

from models.hints import HintBundle
from models.identity import PlatformProfile
from services.scoring import (
    activity_score,
    company_match,
    confidence_bucket,
    detect_contradictions,
    handle_match_for,
    is_profile_url,
    location_match,
    name_similarity,
    profile_completeness,
    score_profile,
)


FULL_PROFILE = PlatformProfile(
    name="John Doe",
    bio="Engineer",
    company="Acme",
    location="Berlin",
    followers=100,
    reputation=500,
    public_repos=20,
    publications=3,
)


def test_perfect_profile_capped_by_base_weight():
    hints = HintBundle(externalId="john-doe", nameHint="John Doe", companyHint="Acme", locationHint="Berlin")
    breakdown = score_profile(hints, FULL_PROFILE, has_bridge_evidence=True, base_weight=0.5)

    assert breakdown.name_match == 1.0
    assert breakdown.company_match == 1.0
    assert breakdown.location_match == 1.0
    assert breakdown.profile_completeness == 1.0
    assert breakdown.activity_score == 1.0
    assert breakdown.bridge_weight == 0.5
    assert breakdown.total == pytest.approx(0.5)


@pytest.mark.parametrize("base_weight", [0.1, 0.15, 0.25, 0.5, 0.6, 1.0])
@pytest.mark.parametrize("bridge", [True, False])
def test_total_never_exceeds_base_weight(base_weight, bridge):
    hints = HintBundle(externalId="john-doe", nameHint="John Doe", companyHint="Acme", locationHint="Berlin")
    breakdown = score_profile(hints, FULL_PROFILE, bridge, base_weight, handle_match=1.0)
    assert breakdown.total <= base_weight


def test_score_is_deterministic():
    hints = HintBundle(externalId="john-doe", nameHint="John Doe")
    a = score_profile(hints, FULL_PROFILE, False, 0.6)
    b = score_profile(hints, FULL_PROFILE, False, 0.6)
    assert a == b


def test_handle_match_fills_identity_slot():
    hints = HintBundle(externalId="john-doe")
    empty = PlatformProfile()
    without = score_profile(hints, empty, False, 1.0)
    with_handle = score_profile(hints, empty, False, 1.0, handle_match=1.0)
    assert without.total == 0.0
    assert with_handle.total == pytest.approx(0.35)


def test_name_similarity():
    assert name_similarity("John Doe", "john  doe") == 1.0
    assert name_similarity("John Doe", "John Michael Doe") == pytest.approx(2 / 3)
    assert name_similarity("John", "John Doe") == 0.8
    assert name_similarity("John Doe", None) == 0.0


def test_company_and_location_match():
    assert company_match("Acme", "ACME") == 1.0
    assert company_match("Acme", "Acme Corp") == 0.7
    assert company_match("Acme", "Globex") == 0.0
    assert location_match("Berlin", "Berlin, Germany") == 0.6
    assert location_match("Seattle", "Portland") == 0.0
    assert location_match("New York City", "Greater New York") == 0.6
    assert location_match("Paris", "paris") == 1.0


def test_completeness_and_activity():
    assert profile_completeness(PlatformProfile(name="x", bio="y")) == 0.5
    assert activity_score(PlatformProfile(followers=11)) == pytest.approx(0.3)
    assert activity_score(PlatformProfile(followers=5, reputation=50)) == 0.0
    assert activity_score(FULL_PROFILE) == 1.0


def test_buckets():
    assert confidence_bucket(0.95) == "auto_merge"
    assert confidence_bucket(0.9) == "auto_merge"
    assert confidence_bucket(0.7) == "suggest"
    assert confidence_bucket(0.3) == "low"
    assert confidence_bucket(0.29) == "rejected"


def test_handle_match_halved_for_deep_links():
    hints = HintBundle(externalId="john-doe")
    assert is_profile_url("https://github.com/john-doe")
    assert not is_profile_url("https://github.com/john-doe/repo/blob/main")
    assert not is_profile_url("https://gitlab.com/groups/john-doe")
    assert handle_match_for("john-doe", "https://github.com/john-doe", hints) == 1.0
    assert handle_match_for("john-doe", "https://github.com/john-doe/repo/tree/x", hints) == 0.5


def test_contradictions_are_reported_not_scored():
    hints = HintBundle(externalId="john-doe", nameHint="John Doe", companyHint="Acme Corp")
    profile = PlatformProfile(name="Maria Garcia", company="Globex")

    has, note = detect_contradictions(hints, profile)
    assert has is True
    assert note == 'Name mismatch: "John Doe" vs "Maria Garcia"; Company differs: "Acme Corp" vs "Globex"'


def test_short_companies_do_not_contradict():
    hints = HintBundle(externalId="john-doe", nameHint="John Doe", companyHint="IBM")
    has, note = detect_contradictions(hints, PlatformProfile(name="John Doe", company="HP Inc"))
    assert (has, note) == (False, None)
