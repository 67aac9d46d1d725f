"""
Evidence network: which evidence the brief leans on, which it barely uses,
and which claims hang on a single piece of evidence.

Purely structural. Nothing here judges evidentiary quality, only how often
and where each evidence_index entry is cited.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from .config import DEFAULT_SETTINGS, AnalysisSettings
from .evidence_index import EvidenceIndex
from .models import EvidenceNetwork, EvidenceNode, SinglePointFailure
from .sections import iter_citations, iter_claims


logger = logging.getLogger(__name__)


def count_mentions(brief: Any, index: Optional[EvidenceIndex] = None) -> Dict[str, int]:
    """
    Number of distinct citing fields per evidence id.
    A field repeating the same id counts once; unresolved ids are dropped.
    """
    index = index if index is not None else EvidenceIndex.from_brief(brief)
    counts: Dict[str, int] = {}
    for citation in iter_citations(brief):
        for ref in index.known(citation.refs):
            counts[ref] = counts.get(ref, 0) + 1
    return counts


def _node(ref: str, mention_count: int, index: EvidenceIndex) -> EvidenceNode:
    entry = index.resolve(ref) or {}
    url = entry.get("url")
    label = entry.get("description")
    return EvidenceNode(
        id=ref,
        mention_count=mention_count,
        type=str(entry.get("type") or "unknown"),
        url=url if isinstance(url, str) and url else None,
        label=" ".join(label.split()) if isinstance(label, str) and label.strip() else None,
    )


def central_ids(counts: Dict[str, int], settings: AnalysisSettings = DEFAULT_SETTINGS) -> Set[str]:
    """
    Central = at least central_min_mentions mentions, or within the top
    central_top_n mention counts (ties included). Ids at the isolated count
    are never central so the two sets stay disjoint.
    """
    candidates = {ref: n for ref, n in counts.items() if n > settings.isolated_mention_count}
    if not candidates:
        return set()

    central = {ref for ref, n in candidates.items() if n >= settings.central_min_mentions}
    if settings.central_top_n > 0:
        ranked = sorted(candidates.values(), reverse=True)
        cutoff = ranked[min(settings.central_top_n, len(ranked)) - 1]
        central |= {ref for ref, n in candidates.items() if n >= cutoff}
    return central


def single_point_failures(
    brief: Any,
    index: EvidenceIndex,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> List[SinglePointFailure]:
    out: List[SinglePointFailure] = []
    for claim in iter_claims(brief):
        if len(out) >= settings.max_single_point_failures:
            break
        deps = index.known(claim.refs)
        # No citations means nothing to depend on; more than the limit means corroboration
        if 1 <= len(deps) <= settings.spf_max_refs:
            out.append(
                SinglePointFailure(
                    claim_area=claim.area,
                    description=claim.description,
                    depends_on_ids=deps,
                )
            )
    return out


def compute_evidence_network(
    brief: Any,
    settings: Optional[AnalysisSettings] = None,
) -> EvidenceNetwork:
    settings = settings or DEFAULT_SETTINGS
    index = EvidenceIndex.from_brief(brief)
    if len(index) == 0:
        return EvidenceNetwork()

    counts = count_mentions(brief, index)
    central = central_ids(counts, settings)

    central_nodes = [
        _node(ref, counts[ref], index)
        for ref in sorted(central, key=lambda r: (-counts[r], r))
    ]

    isolated = sorted(
        ref for ref, n in counts.items()
        if n == settings.isolated_mention_count and ref not in central
    )
    isolated_nodes = [_node(ref, counts[ref], index) for ref in isolated[: settings.max_isolated_nodes]]

    spf = single_point_failures(brief, index, settings)

    logger.debug(
        "evidence network: mentioned=%d central=%d isolated=%d spf=%d",
        len(counts),
        len(central_nodes),
        len(isolated_nodes),
        len(spf),
    )
    return EvidenceNetwork(
        central_nodes=central_nodes,
        isolated_nodes=isolated_nodes,
        single_point_failures=spf,
    )
