"""
Narrative coherence scan: deterministic consistency checks across brief
sections. Every rule is a structural field check; no inference.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple

from .config import DEFAULT_SETTINGS, AnalysisSettings
from .evidence_index import EvidenceIndex
from .models import CoherenceAlert
from .sections import (
    CONTRADICTIONS,
    HYPOTHESES,
    WORKING_TIMELINE,
    as_list,
    contradiction_refs,
    items,
    str_refs,
    text,
    timeline_refs,
)
from .sources import DEFAULT_SOURCE_POLICY, SourcePolicy, classify_entry


logger = logging.getLogger(__name__)

SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2}

# Rules yield (location, alert); location is the brief item the alert is about
Rule = Callable[[Any, EvidenceIndex, AnalysisSettings, SourcePolicy], Iterator[Tuple[str, CoherenceAlert]]]


def _quote(s: str, limit: int = 60) -> str:
    return f"'{s[:limit]}…'" if len(s) > limit else f"'{s}'"


def hypothesis_counter_evidence(
    brief: Any, index: EvidenceIndex, settings: AnalysisSettings, policy: SourcePolicy
) -> Iterator[Tuple[str, CoherenceAlert]]:
    for i, item in enumerate(items(brief, HYPOTHESES)):
        if item.get("likelihood") != "high":
            continue
        against = str_refs(item.get("evidence_against"))
        if not against:
            continue
        yield f"{HYPOTHESES}[{i}]", CoherenceAlert(
            severity="high",
            alert=f"High-likelihood hypothesis {_quote(text(item.get('statement')))} has evidence weighing against it.",
            why_it_matters=(
                "A hypothesis rated highly likely should not carry material counter-evidence; "
                "either the likelihood or the counter-evidence needs to be reconciled."
            ),
            affected_sections=[HYPOTHESES],
            related_evidence_ids=index.known(against),
        )


def verified_events_undersourced(
    brief: Any, index: EvidenceIndex, settings: AnalysisSettings, policy: SourcePolicy
) -> Iterator[Tuple[str, CoherenceAlert]]:
    for i, item in enumerate(items(brief, WORKING_TIMELINE)):
        if item.get("verified") is not True:
            continue
        refs = timeline_refs(item)
        if len(refs) > 1:
            continue
        yield f"{WORKING_TIMELINE}[{i}]", CoherenceAlert(
            severity="high",
            alert=f"Verified timeline event {_quote(text(item.get('event')))} is supported by zero or one reference.",
            why_it_matters="Verified events should have multiple independent references to justify confirmation status.",
            affected_sections=[WORKING_TIMELINE],
            related_evidence_ids=index.known(refs),
        )


def _is_weak(ref: str, index: EvidenceIndex, settings: AnalysisSettings, policy: SourcePolicy) -> bool:
    if index.tier_of(ref) == "primary":
        return False
    return classify_entry(index.resolve(ref) or {}, policy) in settings.weak_categories


def high_confidence_weak_sources(
    brief: Any, index: EvidenceIndex, settings: AnalysisSettings, policy: SourcePolicy
) -> Iterator[Tuple[str, CoherenceAlert]]:
    for i, item in enumerate(items(brief, WORKING_TIMELINE)):
        if item.get("confidence") != "high":
            continue
        refs = timeline_refs(item)
        if not refs:
            continue
        weak = sum(1 for ref in refs if _is_weak(ref, index, settings, policy))
        if weak / len(refs) <= settings.weak_source_ratio:
            continue
        yield f"{WORKING_TIMELINE}[{i}]", CoherenceAlert(
            severity="medium",
            alert=(
                f"High-confidence timeline event {_quote(text(item.get('event')))} "
                "relies primarily on social or unverified sources."
            ),
            why_it_matters="High confidence should align with higher-credibility sources such as primary or official records.",
            affected_sections=[WORKING_TIMELINE],
            related_evidence_ids=index.known(refs),
        )


def unresolved_contradictions(
    brief: Any, index: EvidenceIndex, settings: AnalysisSettings, policy: SourcePolicy
) -> Iterator[Tuple[str, CoherenceAlert]]:
    for i, item in enumerate(items(brief, CONTRADICTIONS)):
        if as_list(item.get("resolution_tasks")):
            continue
        yield f"{CONTRADICTIONS}[{i}]", CoherenceAlert(
            severity="high",
            alert=f"Contradiction {_quote(text(item.get('issue')))} has no resolution tasks.",
            why_it_matters="Unresolved contradictions without concrete next steps reduce actionable clarity.",
            affected_sections=[CONTRADICTIONS],
            related_evidence_ids=index.known(contradiction_refs(item)),
        )


RULES: List[Rule] = [
    hypothesis_counter_evidence,
    verified_events_undersourced,
    high_confidence_weak_sources,
    unresolved_contradictions,
]


def compute_coherence_alerts(
    brief: Any,
    settings: Optional[AnalysisSettings] = None,
    policy: Optional[SourcePolicy] = None,
) -> List[CoherenceAlert]:
    """
    Run every rule and return alerts ordered high, medium, low.
    Order within a severity follows rule order then document order.
    An item raising the same alert twice is reported once; distinct items
    with identical text each get their own alert.
    """
    settings = settings or DEFAULT_SETTINGS
    policy = policy or DEFAULT_SOURCE_POLICY
    index = EvidenceIndex.from_brief(brief)

    alerts: List[CoherenceAlert] = []
    seen = set()
    for rule in RULES:
        for location, alert in rule(brief, index, settings, policy):
            key = (location, alert.severity, alert.alert)
            if key in seen:
                continue
            seen.add(key)
            alerts.append(alert)

    # stable sort keeps rule and document order within a severity
    alerts = sorted(alerts, key=lambda a: SEVERITY_ORDER[a.severity])
    logger.debug("coherence alerts: %d raised, keeping %d", len(alerts), min(len(alerts), settings.max_alerts))
    return alerts[: settings.max_alerts]
