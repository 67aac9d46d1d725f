from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import ValidationError

from .models import BriefDocument


logger = logging.getLogger(__name__)


class BriefValidationError(ValueError):
    """Raised when a generated brief does not match the brief schema."""


def _format_pydantic_error(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    extra = f" (+{err.error_count() - 1} more)" if err.error_count() > 1 else ""
    return f"{loc}: {msg}{extra}" if loc else f"{msg}{extra}"


def _check_refs(refs: Optional[Iterable[str]], evidence_ids: Set[str], where: str) -> None:
    for j, ref in enumerate(refs or []):
        if ref not in evidence_ids:
            raise BriefValidationError(f"{where}[{j}] references missing evidence_index id: {ref}")


def _check_contradictions(doc: BriefDocument, evidence_ids: Set[str]) -> None:
    for i, c in enumerate(doc.contradictions_tensions):
        where = f"contradictions_tensions[{i}]"
        if c.is_structured:
            if c.issue_type is None:
                raise BriefValidationError(
                    f"{where}.issue_type must be one of: date, count, identity, location, claim, other"
                )
            if c.why_it_matters is None:
                raise BriefValidationError(f"{where}.why_it_matters must be a string")
            if c.statement_a_refs is None:
                raise BriefValidationError(f"{where}.statement_a_refs must be an array")
            if c.statement_b_refs is None:
                raise BriefValidationError(f"{where}.statement_b_refs must be an array")
            _check_refs(c.statement_a_refs, evidence_ids, f"{where}.statement_a_refs")
            _check_refs(c.statement_b_refs, evidence_ids, f"{where}.statement_b_refs")
        else:
            if c.details is None:
                raise BriefValidationError(f"{where}.details must be a string")
            if c.source_refs is None:
                raise BriefValidationError(f"{where}.source_refs must be an array")


def _check_referential_integrity(doc: BriefDocument) -> None:
    evidence_ids = set(doc.evidence_index.keys())

    for i, item in enumerate(doc.working_timeline):
        _check_refs(item.source_ids, evidence_ids, f"working_timeline[{i}].source_ids")

    _check_contradictions(doc, evidence_ids)

    for i, es in enumerate(doc.evidence_strength or []):
        _check_refs(es.supporting_refs, evidence_ids, f"evidence_strength[{i}].supporting_refs")

    for i, h in enumerate(doc.hypotheses or []):
        _check_refs(h.evidence_for, evidence_ids, f"hypotheses[{i}].evidence_for")
        _check_refs(h.evidence_against, evidence_ids, f"hypotheses[{i}].evidence_against")

    for i, ct in enumerate(doc.collapse_tests or []):
        _check_refs(ct.supporting_refs, evidence_ids, f"collapse_tests[{i}].supporting_refs")

    for i, m in enumerate(doc.incentive_matrix or []):
        _check_refs(m.supporting_refs, evidence_ids, f"incentive_matrix[{i}].supporting_refs")


def validate_brief(raw: Any) -> Dict[str, Any]:
    """
    Validate a generated brief and return it as a normalized JSON document.

    Coercions (overview to string, timeline basis, default supporting_refs)
    are applied; anything else that does not fit the schema raises
    BriefValidationError. Unknown fields are preserved.
    """
    if not isinstance(raw, dict):
        raise BriefValidationError("Brief must be a JSON object")

    try:
        doc = BriefDocument.model_validate(raw)
    except ValidationError as e:
        raise BriefValidationError(_format_pydantic_error(e)) from e

    _check_referential_integrity(doc)

    out = doc.model_dump(mode="json", exclude_none=True)
    logger.debug(
        "brief validated: timeline=%d evidence=%d contradictions=%d",
        len(doc.working_timeline),
        len(doc.evidence_index),
        len(doc.contradictions_tensions),
    )
    return out


def validation_errors(raw: Any) -> List[str]:
    """
    Non-raising variant for the CLI: returns [] when the brief is valid.
    """
    try:
        validate_brief(raw)
    except BriefValidationError as e:
        return [str(e)]
    return []
