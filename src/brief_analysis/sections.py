"""
Lenient adapters over a brief document.

Every analyzer reads the brief through these helpers instead of indexing the
raw JSON directly: missing sections become empty lists, non-dict items are
skipped and reference lists keep only strings. Older stored briefs (written
before a section existed) therefore read exactly like briefs with that
section empty.

Citations and claims are produced by small per-section extractors so the
shape of each section (single ref list, two-sided contradiction, ...) stays
local to one function.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple


EXECUTIVE_OVERVIEW = "executive_overview"
WORKING_TIMELINE = "working_timeline"
KEY_ENTITIES = "key_entities"
CONTRADICTIONS = "contradictions_tensions"
HYPOTHESES = "hypotheses"
CRITICAL_GAPS = "critical_gaps"
VERIFICATION_TASKS = "verification_tasks"
EVIDENCE_STRENGTH = "evidence_strength"
COLLAPSE_TESTS = "collapse_tests"
INCENTIVE_MATRIX = "incentive_matrix"


@dataclass(frozen=True)
class Citation:
    """One field of one brief item that cites evidence."""
    section: str
    location: str
    refs: Tuple[str, ...]


@dataclass(frozen=True)
class Claim:
    """One assertion in the brief together with everything it cites."""
    section: str
    area: str
    description: str
    refs: Tuple[str, ...]


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def str_refs(value: Any) -> List[str]:
    return [r for r in as_list(value) if isinstance(r, str)]


def union_refs(*ref_lists: Iterable[str]) -> Tuple[str, ...]:
    # de-dupe preserve order
    seen = set()
    out: List[str] = []
    for refs in ref_lists:
        for r in refs:
            if r not in seen:
                seen.add(r)
                out.append(r)
    return tuple(out)


def text(value: Any) -> str:
    return " ".join(str(value or "").split())


def items(brief: Any, section: str) -> List[Dict[str, Any]]:
    if not isinstance(brief, dict):
        return []
    return [it for it in as_list(brief.get(section)) if isinstance(it, dict)]


def timeline_refs(item: Dict[str, Any]) -> Tuple[str, ...]:
    # source_ids is the schema field; source_refs appears on some older briefs
    return union_refs(str_refs(item.get("source_ids")), str_refs(item.get("source_refs")))


def is_structured_contradiction(item: Dict[str, Any]) -> bool:
    return isinstance(item.get("statement_a"), str) and isinstance(item.get("statement_b"), str)


def contradiction_refs(item: Dict[str, Any]) -> Tuple[str, ...]:
    return union_refs(
        str_refs(item.get("statement_a_refs")),
        str_refs(item.get("statement_b_refs")),
        str_refs(item.get("source_refs")),
    )


# ---------------------------------------------------------------------------
# Citation extractors (feed mention counting)
# ---------------------------------------------------------------------------


def timeline_citations(brief: Any) -> Iterator[Citation]:
    for i, item in enumerate(items(brief, WORKING_TIMELINE)):
        yield Citation(WORKING_TIMELINE, f"{WORKING_TIMELINE}[{i}]", timeline_refs(item))


def entity_citations(brief: Any) -> Iterator[Citation]:
    for i, item in enumerate(items(brief, KEY_ENTITIES)):
        yield Citation(KEY_ENTITIES, f"{KEY_ENTITIES}[{i}].source_refs", union_refs(str_refs(item.get("source_refs"))))


def contradiction_citations(brief: Any) -> Iterator[Citation]:
    for i, item in enumerate(items(brief, CONTRADICTIONS)):
        for field in ("statement_a_refs", "statement_b_refs", "source_refs"):
            yield Citation(CONTRADICTIONS, f"{CONTRADICTIONS}[{i}].{field}", union_refs(str_refs(item.get(field))))


def hypothesis_citations(brief: Any) -> Iterator[Citation]:
    for i, item in enumerate(items(brief, HYPOTHESES)):
        for field in ("evidence_for", "evidence_against"):
            yield Citation(HYPOTHESES, f"{HYPOTHESES}[{i}].{field}", union_refs(str_refs(item.get(field))))


def _supporting_refs_citations(section: str) -> Callable[[Any], Iterator[Citation]]:
    def extract(brief: Any) -> Iterator[Citation]:
        for i, item in enumerate(items(brief, section)):
            yield Citation(section, f"{section}[{i}].supporting_refs", union_refs(str_refs(item.get("supporting_refs"))))

    return extract


evidence_strength_citations = _supporting_refs_citations(EVIDENCE_STRENGTH)
collapse_test_citations = _supporting_refs_citations(COLLAPSE_TESTS)
incentive_matrix_citations = _supporting_refs_citations(INCENTIVE_MATRIX)


CITATION_EXTRACTORS: Tuple[Callable[[Any], Iterator[Citation]], ...] = (
    timeline_citations,
    entity_citations,
    contradiction_citations,
    evidence_strength_citations,
    hypothesis_citations,
    collapse_test_citations,
    incentive_matrix_citations,
)


def iter_citations(brief: Any) -> Iterator[Citation]:
    for extract in CITATION_EXTRACTORS:
        yield from extract(brief)


# ---------------------------------------------------------------------------
# Claim extractors (feed single-point-of-failure detection)
# ---------------------------------------------------------------------------


def timeline_claims(brief: Any) -> Iterator[Claim]:
    for i, item in enumerate(items(brief, WORKING_TIMELINE)):
        yield Claim(WORKING_TIMELINE, f"{WORKING_TIMELINE}[{i}]", text(item.get("event")), timeline_refs(item))


def hypothesis_claims(brief: Any) -> Iterator[Claim]:
    for i, item in enumerate(items(brief, HYPOTHESES)):
        refs = union_refs(str_refs(item.get("evidence_for")), str_refs(item.get("evidence_against")))
        yield Claim(HYPOTHESES, f"{HYPOTHESES}[{i}]", text(item.get("statement")), refs)


def contradiction_claims(brief: Any) -> Iterator[Claim]:
    """
    Structured contradictions contribute one claim per side; legacy ones
    (issue + details + source_refs) are a single claim.
    """
    for i, item in enumerate(items(brief, CONTRADICTIONS)):
        if is_structured_contradiction(item):
            for side in ("a", "b"):
                yield Claim(
                    CONTRADICTIONS,
                    f"{CONTRADICTIONS}[{i}].statement_{side}",
                    text(item.get(f"statement_{side}")),
                    union_refs(str_refs(item.get(f"statement_{side}_refs"))),
                )
        else:
            yield Claim(CONTRADICTIONS, f"{CONTRADICTIONS}[{i}]", text(item.get("issue")), contradiction_refs(item))


def collapse_test_claims(brief: Any) -> Iterator[Claim]:
    for i, item in enumerate(items(brief, COLLAPSE_TESTS)):
        yield Claim(
            COLLAPSE_TESTS,
            f"{COLLAPSE_TESTS}[{i}]",
            text(item.get("claim_or_hypothesis")),
            union_refs(str_refs(item.get("supporting_refs"))),
        )


def evidence_strength_claims(brief: Any) -> Iterator[Claim]:
    for i, item in enumerate(items(brief, EVIDENCE_STRENGTH)):
        yield Claim(
            EVIDENCE_STRENGTH,
            f"{EVIDENCE_STRENGTH}[{i}]",
            text(item.get("theme")),
            union_refs(str_refs(item.get("supporting_refs"))),
        )


CLAIM_EXTRACTORS: Tuple[Callable[[Any], Iterator[Claim]], ...] = (
    timeline_claims,
    contradiction_claims,
    hypothesis_claims,
    collapse_test_claims,
    evidence_strength_claims,
)


def iter_claims(brief: Any) -> Iterator[Claim]:
    for extract in CLAIM_EXTRACTORS:
        yield from extract(brief)
