import copy

from brief_analysis.evidence_strength import derive_evidence_strength_counts


def theme(refs, **extra):
    item = {
        "theme": "Ownership",
        "results_count": 2,
        "saved_links_count": 1,
        "wayback_count": 0,
        "note_count": 0,
        "corroboration_estimate": "moderate",
        "strength_rating": "medium",
        "supporting_refs": refs,
    }
    item.update(extra)
    return item


def brief(items):
    return {
        "evidence_index": {
            "s1": {"type": "url", "source_tier": "primary"},
            "s2": {"type": "url", "source_tier": "secondary"},
            "s3": {"type": "url", "source_tier": "secondary"},
            "r1": {"type": "result"},
        },
        "evidence_strength": items,
    }


def test_counts_by_tier():
    b = brief([theme(["s1", "s2", "s3", "r1"])])
    derive_evidence_strength_counts(b)
    item = b["evidence_strength"][0]
    assert item["primary_sources_count"] == 1
    assert item["secondary_sources_count"] == 2


def test_overwrites_generator_values():
    b = brief([theme(["s1"], primary_sources_count=99, secondary_sources_count=7)])
    derive_evidence_strength_counts(b)
    assert b["evidence_strength"][0]["primary_sources_count"] == 1
    assert b["evidence_strength"][0]["secondary_sources_count"] == 0


def test_dangling_refs_are_ignored():
    b = brief([theme(["s1", "ghost"])])
    derive_evidence_strength_counts(b)
    assert b["evidence_strength"][0]["primary_sources_count"] == 1
    assert b["evidence_strength"][0]["secondary_sources_count"] == 0


def test_non_list_refs_give_zero_counts():
    b = brief([theme("s1", primary_sources_count=3), theme(None)])
    derive_evidence_strength_counts(b)
    for item in b["evidence_strength"]:
        assert item["primary_sources_count"] == 0
        assert item["secondary_sources_count"] == 0


def test_idempotent():
    b = brief([theme(["s1", "s2"]), theme(["s3", "r1", "ghost"])])
    derive_evidence_strength_counts(b)
    first = copy.deepcopy(b)
    derive_evidence_strength_counts(b)
    assert b == first


def test_absent_or_empty_section_untouched():
    absent = {"evidence_index": {"s1": {"source_tier": "primary"}}}
    derive_evidence_strength_counts(absent)
    assert "evidence_strength" not in absent

    empty = brief([])
    derive_evidence_strength_counts(empty)
    assert empty["evidence_strength"] == []


def test_missing_evidence_index():
    b = {"evidence_strength": [theme(["s1"])]}
    derive_evidence_strength_counts(b)
    assert b["evidence_strength"][0]["primary_sources_count"] == 0
