from brief_analysis.sources import (
    SourcePolicy,
    classify_entry,
    compute_source_credibility_summary,
    credibility_weight,
    host_from_url,
    is_official_host,
)


def policy():
    return SourcePolicy.from_config(
        official_domains=["europa.eu"],
        news_domains=["reuters.com", "bbc.co.uk"],
        social_domains=["x.com", "twitter.com"],
    )


def test_host_from_url_basic():
    assert host_from_url("https://reuters.com/a/b") == "reuters.com"
    assert host_from_url("http://www.reuters.com") == "reuters.com"
    assert host_from_url("reuters.com/world") == "reuters.com"
    assert host_from_url("https://www.bbc.co.uk:443/news") == "bbc.co.uk"


def test_host_from_url_rejects_garbage():
    assert host_from_url("") is None
    assert host_from_url(None) is None
    assert host_from_url(42) is None


def test_official_hosts():
    assert is_official_host("data.census.gov") is True
    assert is_official_host("www.army.mil") is True
    assert is_official_host("assets.publishing.service.gov.uk") is True
    assert is_official_host("ec.europa.eu", policy()) is True
    assert is_official_host("governor-news.com") is False


def test_classify_by_host_not_substring():
    p = policy()
    assert classify_entry({"url": "https://x.com/user/status/1"}, p) == "social"
    # netflix.com contains "x.com" but is not x.com
    assert classify_entry({"url": "https://netflix.com/title/1"}, p) == "other"
    assert classify_entry({"url": "https://www.reuters.com/world/a"}, p) == "established_news"
    assert classify_entry({"url": "https://www.fbi.gov/news"}, p) == "official"


def test_classify_flags_and_internal_material():
    p = policy()
    assert classify_entry({"official_source": True, "url": "https://x.com/a"}, p) == "official"
    assert classify_entry({"type": "note"}, p) == "internal"
    assert classify_entry({"type": "Confidential", "url": "https://reuters.com"}, p) == "internal"
    assert classify_entry({"type": "url"}, p) == "unverified"
    assert classify_entry(None, p) == "unverified"


def test_credibility_weight_prefers_analyst_tier():
    p = policy()
    assert credibility_weight({"source_tier": "primary", "url": "https://x.com/a"}, p) == 1.0
    assert credibility_weight({"source_tier": "secondary"}, p) == 0.8
    assert credibility_weight({"url": "https://x.com/a"}, p) == 0.35
    assert credibility_weight({}, p) == 0.2


def test_credibility_summary():
    assert compute_source_credibility_summary({}).startswith("No evidence index entries")
    strong = compute_source_credibility_summary(
        {"s1": {"url": "https://www.fbi.gov/a", "source_tier": "primary"}, "s2": {"url": "https://reuters.com/b"}},
        policy(),
    )
    assert strong.startswith("Evidence draws strongly")
    assert "(1 primary, 0 secondary source marked by analyst)" in strong

    weak = compute_source_credibility_summary({"n1": {"type": "note"}, "u1": {}}, policy())
    assert weak.startswith("Limited high-weight sources")


def test_gov_label_only_counts_at_top_levels():
    assert is_official_host("gov.attacker-blog.com") is False
    assert is_official_host("mil.example.org") is False
    assert is_official_host("gov.com") is False
    assert is_official_host("gov.uk") is True
    assert is_official_host("www.army.mil.nz") is True
    assert classify_entry({"url": "https://gov.attacker-blog.com/post"}, policy()) == "other"
