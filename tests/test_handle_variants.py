from __future__ import annotations

import pytest

from config.discovery import HandleVariantWeights
from sources.handle_variants import generate_handle_variants, handle_match_score


def test_variants_ranked_from_linkedin_style_slug():
    variants = generate_handle_variants("john-doe-1234", "John Doe", max_variants=10)
    handles = [v.handle for v in variants]

    assert handles[:5] == ["john-doe-1234", "john-doe", "johndoe", "john_doe", "john.doe"]
    assert "jdoe" in handles
    confidences = [v.confidence for v in variants]
    assert confidences == sorted(confidences, reverse=True)
    assert variants[0].source == "external_id"
    assert variants[0].variant_id == "handle:clean"


def test_max_variants_keeps_top_ranked():
    variants = generate_handle_variants("john-doe-1234", "John Doe", max_variants=3)
    assert [v.variant_id for v in variants] == ["handle:clean", "handle:stripped", "handle:collapsed"]


def test_duplicates_collapse_to_first_occurrence():
    # firstlast from the name equals the collapsed handle
    variants = generate_handle_variants("johndoe", "John Doe", max_variants=10)
    handles = [v.handle for v in variants]
    assert len(handles) == len(set(handles))
    assert handles[0] == "johndoe"


def test_short_handles_are_dropped():
    variants = generate_handle_variants("a", None)
    assert variants == []


def test_custom_weights_reorder_variants():
    weights = HandleVariantWeights(collapsed=0.95)
    variants = generate_handle_variants("john-doe-1234", None, max_variants=2, weights=weights)
    assert variants[0].handle == "johndoe"


def test_invalid_weight_rejected():
    with pytest.raises(ValueError):
        HandleVariantWeights(verbatim=1.5)


def test_handle_match_score():
    assert handle_match_score("John-Doe-1234", "john-doe-1234") == 1.0
    assert handle_match_score("john-doe", "john-doe-1234") == 0.85
    assert handle_match_score("jdoe", "john-doe-1234", "John Doe") == 0.5
    assert handle_match_score("someoneelse", "john-doe-1234") == 0.0
    assert handle_match_score(None, "john-doe-1234") == 0.0
