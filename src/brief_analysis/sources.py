from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlparse

import idna


CATEGORIES = ("official", "established_news", "social", "internal", "unverified", "other")

_OFFICIAL_LABELS = {"gov", "mil"}

DEFAULT_OFFICIAL_DOMAINS = [
    "europa.eu",
    "un.org",
    "who.int",
]

DEFAULT_NEWS_DOMAINS = [
    "nytimes.com", "bbc.com", "bbc.co.uk", "reuters.com", "apnews.com", "washingtonpost.com",
    "theguardian.com", "npr.org", "cnn.com", "abcnews.go.com", "cbsnews.com",
    "nbcnews.com", "pbs.org", "aljazeera.com", "axios.com", "politico.com",
    "bloomberg.com", "wsj.com", "ft.com", "economist.com", "latimes.com",
    "usatoday.com", "usnews.com", "newsweek.com", "time.com",
    "afp.com", "ap.org", "dw.com", "cbc.ca", "abc.net.au", "scmp.com", "france24.com",
    "theconversation.com", "nature.com", "science.org", "statnews.com",
]

DEFAULT_SOCIAL_DOMAINS = [
    "twitter.com", "x.com", "facebook.com", "instagram.com", "tiktok.com", "reddit.com",
    "youtube.com", "youtu.be", "linkedin.com", "threads.net", "snapchat.com", "t.me",
]


@dataclass(frozen=True)
class SourcePolicy:
    official_domains: frozenset[str]
    news_domains: frozenset[str]
    social_domains: frozenset[str]

    @staticmethod
    def from_config(
        official_domains: Iterable[str],
        news_domains: Iterable[str],
        social_domains: Iterable[str],
    ) -> "SourcePolicy":
        def clean(values: Iterable[str], key: str) -> frozenset[str]:
            if not isinstance(values, (list, tuple, set, frozenset)) or not all(isinstance(v, str) for v in values):
                raise ValueError(f"configs/sources.yaml must contain: {key}: [..strings..]")
            return frozenset(_normalize_host(v.rstrip(".")) for v in values if v.strip())

        return SourcePolicy(
            official_domains=clean(official_domains, "official_domains"),
            news_domains=clean(news_domains, "news_domains"),
            social_domains=clean(social_domains, "social_domains"),
        )


def _normalize_host(host: str) -> str:
    host = host.strip().lower()
    if host.startswith("www."):
        host = host[4:]
    # Convert unicode domains to ASCII punycode for consistent matching
    try:
        host = idna.encode(host).decode("ascii")
    except idna.IDNAError:
        # If conversion fails, keep original lowercased
        pass
    return host


DEFAULT_SOURCE_POLICY = SourcePolicy.from_config(
    DEFAULT_OFFICIAL_DOMAINS, DEFAULT_NEWS_DOMAINS, DEFAULT_SOCIAL_DOMAINS
)


def host_from_url(url: str) -> Optional[str]:
    if not url or not isinstance(url, str):
        return None
    u = url.strip()
    # urlparse needs scheme to parse netloc reliably
    if "://" not in u:
        u = "http://" + u
    try:
        p = urlparse(u)
        host = p.hostname or ""
    except ValueError:
        return None
    host = _normalize_host(host)
    return host or None


def _matches(host: str, domains: Iterable[str]) -> bool:
    for d in domains:
        if host == d or host.endswith("." + d):
            return True
    return False


def is_official_host(host: str, policy: SourcePolicy = DEFAULT_SOURCE_POLICY) -> bool:
    """
    Government and military hosts (example.gov, agency.gov.uk, army.mil)
    plus any configured official domain and its subdomains.
    Only the top level, or the second level under a country code, counts:
    gov.example.com is not official.
    """
    if not host:
        return False
    labels = host.split(".")
    if len(labels) >= 2 and labels[-1] in _OFFICIAL_LABELS:
        return True
    # country-code form: gov.uk, agency.gov.uk, army.mil.nz
    if len(labels) >= 2 and len(labels[-1]) == 2 and labels[-2] in _OFFICIAL_LABELS:
        return True
    return _matches(host, policy.official_domains)


def classify_entry(entry: Any, policy: SourcePolicy = DEFAULT_SOURCE_POLICY) -> str:
    """
    Credibility category for one evidence_index entry.

    Order matters: an analyst "official_source" flag wins, then internal
    material (notes, confidential), then URL host matching. Entries without a
    usable URL are "unverified".
    """
    e: Mapping[str, Any] = entry if isinstance(entry, dict) else {}
    if e.get("official_source") is True:
        return "official"

    etype = str(e.get("type") or "").lower()
    if etype in ("note", "confidential"):
        return "internal"

    host = host_from_url(e.get("url") or "")
    if not host:
        return "unverified"
    if is_official_host(host, policy):
        return "official"
    if _matches(host, policy.news_domains):
        return "established_news"
    if _matches(host, policy.social_domains):
        return "social"
    return "other"


_CATEGORY_WEIGHTS = {
    "official": 1.0,
    "established_news": 1.0,
    "other": 0.5,
    "social": 0.35,
    "internal": 0.3,
    "unverified": 0.2,
}


def credibility_weight(entry: Any, policy: SourcePolicy = DEFAULT_SOURCE_POLICY) -> float:
    """
    Weight 0..1. Analyst-marked official or primary sources get full weight.
    """
    e: Mapping[str, Any] = entry if isinstance(entry, dict) else {}
    if e.get("official_source") is True:
        return 1.0
    tier = e.get("source_tier")
    if tier == "primary":
        return 1.0
    if tier == "secondary":
        return 0.8
    return _CATEGORY_WEIGHTS[classify_entry(e, policy)]


def compute_source_credibility_summary(
    evidence_index: Any,
    policy: SourcePolicy = DEFAULT_SOURCE_POLICY,
) -> str:
    entries = list(evidence_index.values()) if isinstance(evidence_index, dict) else []
    if not entries:
        return "No evidence index entries; credibility cannot be assessed."

    weight_sum = 0.0
    primary = 0
    secondary = 0
    for entry in entries:
        e: Dict[str, Any] = entry if isinstance(entry, dict) else {}
        weight_sum += credibility_weight(e, policy)
        if e.get("source_tier") == "primary":
            primary += 1
        elif e.get("source_tier") == "secondary":
            secondary += 1

    avg = weight_sum / len(entries)

    tier_note = ""
    if primary or secondary:
        plural = "s" if primary + secondary != 1 else ""
        tier_note = f" ({primary} primary, {secondary} secondary source{plural} marked by analyst)"

    if avg >= 0.85:
        return "Evidence draws strongly on official, established news, or analyst-marked primary sources." + tier_note
    if avg >= 0.5:
        return "Evidence is mixed: a blend of official, news, analyst-marked, and other sources." + tier_note
    if avg >= 0.3:
        return (
            "Significant reliance on social or internal material; "
            "consider adding analyst-marked primary or official sources." + tier_note
        )
    return (
        "Limited high-weight sources; adding official or analyst-marked "
        "primary/secondary sources would strengthen the brief." + tier_note
    )
