from __future__ import annotations

import math
from typing import Any, List, Optional, Tuple

from .models import IntegrityScore
from .sections import CONTRADICTIONS, CRITICAL_GAPS, HYPOTHESES, WORKING_TIMELINE, items, str_refs, timeline_refs
from .sources import DEFAULT_SOURCE_POLICY, SourcePolicy, classify_entry


# (upper bound of count, points); anything above the last bound scores 0
CONTRADICTION_BANDS: List[Tuple[int, int]] = [(0, 20), (2, 15), (4, 10)]
GAP_BANDS: List[Tuple[int, int]] = [(0, 15), (2, 10), (4, 5)]

GRADE_BANDS: List[Tuple[int, str]] = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]

STRONG_CATEGORIES = ("official", "established_news")


def _banded(count: int, bands: List[Tuple[int, int]]) -> int:
    for upper, points in bands:
        if count <= upper:
            return points
    return 0


def _grade(score: int) -> str:
    for floor, grade in GRADE_BANDS:
        if score >= floor:
            return grade
    return "F"


def compute_integrity_score(brief: Any, policy: Optional[SourcePolicy] = None) -> IntegrityScore:
    """
    Structural integrity score 0..100 built from five components:
      - timeline events with 2+ references (25)
      - unresolved contradictions (20, fewer is better)
      - critical gaps (15, fewer is better)
      - share of official / established news sources (20)
      - hypotheses carrying counter-evidence (20)
    """
    policy = policy or DEFAULT_SOURCE_POLICY

    timeline = items(brief, WORKING_TIMELINE)
    multi_ref = sum(1 for item in timeline if len(timeline_refs(item)) >= 2)
    timeline_score = (multi_ref / len(timeline)) * 25 if timeline else 0.0

    contradiction_count = len(items(brief, CONTRADICTIONS))
    contradiction_score = _banded(contradiction_count, CONTRADICTION_BANDS)

    gap_count = len(items(brief, CRITICAL_GAPS))
    gap_score = _banded(gap_count, GAP_BANDS)

    index = brief.get("evidence_index") if isinstance(brief, dict) else None
    entries = list(index.values()) if isinstance(index, dict) else []
    strong = sum(1 for e in entries if classify_entry(e, policy) in STRONG_CATEGORIES)
    credibility_score = (strong / len(entries)) * 20 if entries else 0.0

    hypotheses = items(brief, HYPOTHESES)
    balanced = sum(1 for h in hypotheses if str_refs(h.get("evidence_against")))
    hypothesis_score = (balanced / len(hypotheses)) * 20 if hypotheses else 0.0

    raw = timeline_score + contradiction_score + gap_score + credibility_score + hypothesis_score
    # half-up rounding, not banker's
    score = int(math.floor(max(0.0, min(100.0, raw)) + 0.5))

    drivers: List[str] = []
    if timeline_score > 20:
        drivers.append("High proportion of timeline events supported by multiple evidence references.")
    if contradiction_score >= 18:
        drivers.append("Minimal unresolved contradictions.")
    if credibility_score > 15:
        drivers.append("Strong share of official or established news sources.")
    if hypothesis_score > 15:
        drivers.append("Hypotheses include meaningful counter-evidence.")
    if gap_count == 0:
        drivers.append("No critical evidence gaps identified.")

    weak_points: List[str] = []
    if timeline and timeline_score < 10:
        weak_points.append("Low proportion of timeline events with multiple supporting references.")
    if contradiction_count and contradiction_score < 10:
        weak_points.append("Multiple unresolved contradictions present.")
    if gap_count and gap_score < 7:
        weak_points.append("Several critical evidence gaps remain.")
    if entries and credibility_score < 10:
        weak_points.append("Heavy reliance on lower-credibility or unverified sources.")
    if hypotheses and hypothesis_score < 10:
        weak_points.append("Hypotheses lack meaningful counter-evidence.")

    return IntegrityScore(
        score_0_100=score,
        grade=_grade(score),
        drivers=drivers[:3],
        weak_points=weak_points[:3],
    )
