from __future__ import annotations

import logging
from typing import Any, Dict

from .evidence_index import EvidenceIndex


logger = logging.getLogger(__name__)


def derive_evidence_strength_counts(brief: Dict[str, Any]) -> None:
    """
    Fill primary_sources_count / secondary_sources_count on every
    evidence_strength item from its supporting_refs and the evidence_index
    source_tier. Values supplied by the generator are always overwritten.

    Mutates the brief in place. A missing or empty evidence_strength is left
    untouched; refs that do not resolve (or carry no tier) count for nothing.
    """
    items = brief.get("evidence_strength") if isinstance(brief, dict) else None
    if not isinstance(items, list) or not items:
        return

    index = EvidenceIndex.from_brief(brief)

    for item in items:
        if not isinstance(item, dict):
            continue
        refs = item.get("supporting_refs")
        if not isinstance(refs, list):
            item["primary_sources_count"] = 0
            item["secondary_sources_count"] = 0
            continue

        primary = 0
        secondary = 0
        for ref in refs:
            tier = index.tier_of(ref)
            if tier == "primary":
                primary += 1
            elif tier == "secondary":
                secondary += 1

        item["primary_sources_count"] = primary
        item["secondary_sources_count"] = secondary

    logger.debug("evidence_strength counts derived for %d themes", len(items))
