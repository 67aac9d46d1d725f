from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .brief_diff import compute_changes_since_last_version
from .coherence import compute_coherence_alerts
from .config import AppConfig, DEFAULT_SETTINGS
from .evidence_network import compute_evidence_network
from .evidence_strength import derive_evidence_strength_counts
from .integrity import compute_integrity_score
from .sources import DEFAULT_SOURCE_POLICY, compute_source_credibility_summary
from .validation import validate_brief


logger = logging.getLogger(__name__)

CHANGES_FIELD = "changes_since_last_version"


def coerce_previous(previous: Any) -> Optional[Dict[str, Any]]:
    """
    Previous versions come straight from storage: a dict, a JSON string, or
    nothing. Anything unreadable is treated as "no previous version".
    """
    if isinstance(previous, str):
        try:
            previous = json.loads(previous)
        except json.JSONDecodeError:
            logger.warning("previous brief is not valid JSON; skipping diff")
            return None
    return previous if isinstance(previous, dict) else None


def analyze_brief(
    brief: Dict[str, Any],
    previous: Any = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    """
    Attach every derived artifact to a validated brief and return it.

    Order: evidence strength -> evidence network -> coherence alerts -> diff,
    then the credibility summary and integrity score. The brief is mutated in
    place. Derived fields are regenerated on every pass; a stale
    changes_since_last_version is dropped when there is no previous version.
    """
    settings = config.analysis if config else DEFAULT_SETTINGS
    policy = config.sources if config else DEFAULT_SOURCE_POLICY

    derive_evidence_strength_counts(brief)

    network = compute_evidence_network(brief, settings)
    brief["evidence_network"] = network.model_dump(mode="json", exclude_none=True)

    alerts = compute_coherence_alerts(brief, settings, policy)
    brief["coherence_alerts"] = [a.model_dump(mode="json", exclude_none=True) for a in alerts]

    changes = compute_changes_since_last_version(coerce_previous(previous), brief)
    if changes is None:
        brief.pop(CHANGES_FIELD, None)
    else:
        brief[CHANGES_FIELD] = [c.model_dump(mode="json", exclude_none=True) for c in changes]

    brief["source_credibility_summary"] = compute_source_credibility_summary(brief.get("evidence_index"), policy)
    brief["integrity_score"] = compute_integrity_score(brief, policy).model_dump(mode="json")

    logger.info(
        "brief analyzed: central=%d isolated=%d spf=%d alerts=%d changes=%s score=%d",
        len(network.central_nodes),
        len(network.isolated_nodes),
        len(network.single_point_failures),
        len(alerts),
        "n/a" if changes is None else len(changes),
        brief["integrity_score"]["score_0_100"],
    )
    return brief


def process_brief(
    raw: Any,
    previous: Any = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    """
    Validate a freshly generated brief, then analyze it.
    Raises BriefValidationError for schema failures; the previous version is
    never validated (older stored briefs may predate current fields).
    """
    validated = validate_brief(raw)
    return analyze_brief(validated, previous=previous, config=config)


def load_brief(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def read_previous(path: Path) -> Optional[Dict[str, Any]]:
    # Stored versions may be truncated or hand-edited; a bad file just skips the diff
    return coerce_previous(path.read_text(encoding="utf-8"))


def store_brief(brief: Dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(brief, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
