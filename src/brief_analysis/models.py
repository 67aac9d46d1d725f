from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


Level = Literal["high", "medium", "low"]
Basis = Literal["public", "note", "confidential", "unverified"]
EntityType = Literal["person", "org", "domain", "location", "handle", "other"]
IssueType = Literal["date", "count", "identity", "location", "claim", "other"]
SourceTier = Literal["primary", "secondary"]
ChangeKind = Literal["added", "removed", "modified"]
Number = Union[int, float]

_BASIS_VALUES = {"public", "note", "confidential", "unverified"}


class _BriefPart(BaseModel):
    # Generators add fields over time; keep them instead of failing.
    model_config = ConfigDict(extra="allow")


# ---------------------------------------------------------------------------
# Brief document (input)
# ---------------------------------------------------------------------------


class EvidenceEntry(_BriefPart):
    type: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    source_tier: Optional[SourceTier] = None
    official_source: Optional[bool] = None

    @field_validator("source_tier", mode="before")
    @classmethod
    def _coerce_tier(cls, v: Any) -> Optional[str]:
        # Tier is optional analyst metadata; anything unrecognised means "no tier"
        raw = str(v).strip().lower() if isinstance(v, str) else None
        return raw if raw in ("primary", "secondary") else None


# Entries that do not fit EvidenceEntry (strings, odd field types) are kept as-is;
# EvidenceIndex reads them as empty entries.
EvidenceValue = Annotated[Union[EvidenceEntry, Any], Field(union_mode="left_to_right")]


class TimelineItem(_BriefPart):
    time_window: str
    event: str
    confidence: Level
    basis: Basis
    source_ids: List[str]
    source_refs: Optional[List[str]] = None
    # User-controlled annotation; the generator must not set it.
    verified: Optional[bool] = None

    @field_validator("basis", mode="before")
    @classmethod
    def _coerce_basis(cls, v: Any) -> str:
        raw = str(v or "").strip().lower()
        if raw in _BASIS_VALUES:
            return raw
        # Common generator slip-ups map to public; anything else is unverified
        return "public" if raw in ("published", "official") else "unverified"


class KeyEntity(_BriefPart):
    name: str
    type: EntityType
    source_refs: List[str]


class Contradiction(_BriefPart):
    """
    Two shapes are accepted:
      - legacy: issue + details + source_refs
      - structured: issue + issue_type + statement_a/b + refs + why_it_matters + resolution_tasks
    Which fields are required per shape is enforced in validation.validate_brief.
    """
    issue: str
    details: Optional[str] = None
    source_refs: Optional[List[str]] = None
    issue_type: Optional[IssueType] = None
    statement_a: Optional[str] = None
    statement_a_refs: Optional[List[str]] = None
    statement_b: Optional[str] = None
    statement_b_refs: Optional[List[str]] = None
    why_it_matters: Optional[str] = None
    resolution_tasks: Optional[List[str]] = None

    @property
    def is_structured(self) -> bool:
        return isinstance(self.statement_a, str) and isinstance(self.statement_b, str)


class VerificationTask(_BriefPart):
    task: str
    priority: Level
    suggested_queries: List[Any]


class EvidenceStrengthItem(_BriefPart):
    theme: str
    results_count: Number
    saved_links_count: Number
    wayback_count: Number
    note_count: Number
    corroboration_estimate: str
    strength_rating: Level
    primary_sources_count: Optional[Number] = None
    secondary_sources_count: Optional[Number] = None
    supporting_refs: List[str] = Field(default_factory=list)

    @field_validator("supporting_refs", mode="before")
    @classmethod
    def _default_refs(cls, v: Any) -> Any:
        return [] if v is None else v


class Hypothesis(_BriefPart):
    statement: str
    likelihood: Level
    evidence_for: List[str]
    evidence_against: List[str]
    falsification_tests: List[str]


class CriticalGap(_BriefPart):
    missing_item: str
    why_it_matters: str
    fastest_way_to_verify: str
    suggested_queries: List[str]


class CollapseTest(_BriefPart):
    claim_or_hypothesis: str
    critical_assumptions: List[str]
    single_points_of_failure: List[str]
    what_would_falsify: List[str]
    highest_leverage_next_step: str
    supporting_refs: List[str]


class IncentiveMatrixEntry(_BriefPart):
    actor: str
    role: str
    narrative_a_incentives: List[str]
    narrative_b_incentives: List[str]
    exposure_if_false: List[str]
    supporting_refs: List[str]


class BriefDocument(_BriefPart):
    executive_overview: str = ""
    working_timeline: List[TimelineItem]
    evidence_index: Dict[str, EvidenceValue]
    key_entities: List[KeyEntity]
    contradictions_tensions: List[Contradiction]
    verification_tasks: List[VerificationTask]
    evidence_strength: Optional[List[EvidenceStrengthItem]] = None
    hypotheses: Optional[List[Hypothesis]] = None
    critical_gaps: Optional[List[CriticalGap]] = None
    collapse_tests: Optional[List[CollapseTest]] = None
    incentive_matrix: Optional[List[IncentiveMatrixEntry]] = None
    source_credibility_summary: Optional[str] = None

    @field_validator("executive_overview", mode="before")
    @classmethod
    def _coerce_overview(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("source_credibility_summary", mode="before")
    @classmethod
    def _coerce_summary(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


# ---------------------------------------------------------------------------
# Derived artifacts (output)
# ---------------------------------------------------------------------------


class EvidenceNode(BaseModel):
    id: str
    mention_count: int = Field(ge=0)
    type: str = "unknown"
    url: Optional[str] = None
    label: Optional[str] = None


class SinglePointFailure(BaseModel):
    claim_area: str
    description: str = ""
    depends_on_ids: List[str] = Field(default_factory=list)


class EvidenceNetwork(BaseModel):
    central_nodes: List[EvidenceNode] = Field(default_factory=list)
    isolated_nodes: List[EvidenceNode] = Field(default_factory=list)
    single_point_failures: List[SinglePointFailure] = Field(default_factory=list)


class CoherenceAlert(BaseModel):
    severity: Level
    alert: str
    why_it_matters: str
    affected_sections: List[str] = Field(default_factory=list)
    related_evidence_ids: List[str] = Field(default_factory=list)


class ChangeEntry(BaseModel):
    section: str
    kind: ChangeKind
    label: str
    detail: Optional[str] = None


class IntegrityScore(BaseModel):
    score_0_100: int = Field(ge=0, le=100)
    grade: Literal["A", "B", "C", "D", "F"]
    drivers: List[str] = Field(default_factory=list, max_length=5)
    weak_points: List[str] = Field(default_factory=list, max_length=5)
