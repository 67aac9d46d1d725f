from brief_analysis.evidence_index import EvidenceIndex


def index():
    return EvidenceIndex.from_brief(
        {
            "evidence_index": {
                "s1": {"type": "url", "source_tier": "primary"},
                "s2": {"type": "url", "source_tier": "secondary"},
                "r1": {"type": "result", "source_tier": None},
                "bad": "not-a-dict",
            }
        }
    )


def test_resolve_known_and_unknown():
    idx = index()
    assert idx.resolve("s1")["type"] == "url"
    assert idx.resolve("ghost") is None
    assert idx.resolve(None) is None
    assert idx.resolve(7) is None


def test_tier_of():
    idx = index()
    assert idx.tier_of("s1") == "primary"
    assert idx.tier_of("s2") == "secondary"
    assert idx.tier_of("r1") is None
    assert idx.tier_of("bad") is None
    assert idx.tier_of("ghost") is None


def test_known_filters_and_dedupes_in_order():
    idx = index()
    assert idx.known(["r1", "ghost", "s1", "r1", 3, "s2"]) == ["r1", "s1", "s2"]


def test_missing_or_malformed_index_is_empty():
    assert len(EvidenceIndex.from_brief({})) == 0
    assert len(EvidenceIndex.from_brief({"evidence_index": ["s1"]})) == 0
    assert len(EvidenceIndex.from_brief(None)) == 0
    assert "s1" not in EvidenceIndex.from_brief({"evidence_index": None})
