"""
Deterministic diff between two brief versions.
Pure JSON comparison: same (previous, current) pair, same output.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .models import ChangeEntry
from .sections import (
    CONTRADICTIONS,
    CRITICAL_GAPS,
    EVIDENCE_STRENGTH,
    EXECUTIVE_OVERVIEW,
    HYPOTHESES,
    KEY_ENTITIES,
    VERIFICATION_TASKS,
    WORKING_TIMELINE,
    items,
    text,
    timeline_refs,
)


logger = logging.getLogger(__name__)

# Fields that never count as a content change.
# verified is a human annotation; the source counts are derived from refs.
TIMELINE_EXCLUDED: FrozenSet[str] = frozenset({"verified"})
EVIDENCE_STRENGTH_EXCLUDED: FrozenSet[str] = frozenset({"primary_sources_count", "secondary_sources_count"})


def canonical_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)


def _view(item: Dict[str, Any], excluded: FrozenSet[str]) -> Dict[str, Any]:
    return {k: v for k, v in item.items() if k not in excluded}


def timeline_view(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Substantive content of a timeline item: everything but the excluded
    fields, with source ids/refs folded into one sorted list.
    """
    view = _view(item, TIMELINE_EXCLUDED | {"source_ids", "source_refs"})
    view["source_ids"] = sorted(timeline_refs(item))
    return view


def fingerprint(view: Dict[str, Any]) -> str:
    return canonical_json(view)


def _changed_fields(before: Dict[str, Any], after: Dict[str, Any]) -> Optional[str]:
    keys = sorted(k for k in set(before) | set(after) if canonical_json(before.get(k)) != canonical_json(after.get(k)))
    return f"changed: {', '.join(keys)}" if keys else None


def _truncate(s: str, limit: int) -> str:
    return s[:limit] + "…" if len(s) > limit else s


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _diff_executive_overview(previous: Dict[str, Any], current: Dict[str, Any]) -> List[ChangeEntry]:
    before = str(previous.get(EXECUTIVE_OVERVIEW) or "").strip()
    after = str(current.get(EXECUTIVE_OVERVIEW) or "").strip()
    if before == after:
        return []
    return [ChangeEntry(section=EXECUTIVE_OVERVIEW, kind="modified", label="Executive overview updated")]


def _timeline_label(kind: str, item: Dict[str, Any]) -> str:
    return f"Timeline: {kind} event '{_truncate(text(item.get('event')), 60)}'"


def _diff_timeline(previous: Dict[str, Any], current: Dict[str, Any]) -> List[ChangeEntry]:
    """
    Identical items are matched first regardless of position, so inserting
    or reordering events does not mark the rest as modified. Leftover items
    are paired in document order (modified); the surplus is added/removed.
    """
    prev_items = items(previous, WORKING_TIMELINE)
    cur_items = items(current, WORKING_TIMELINE)
    prev_views = [timeline_view(i) for i in prev_items]
    cur_views = [timeline_view(i) for i in cur_items]
    prev_fps = [fingerprint(v) for v in prev_views]

    unmatched_prev = list(range(len(prev_items)))
    unmatched_cur: List[int] = []
    for ci, view in enumerate(cur_views):
        fp = fingerprint(view)
        match = next((pi for pi in unmatched_prev if prev_fps[pi] == fp), None)
        if match is None:
            unmatched_cur.append(ci)
        else:
            unmatched_prev.remove(match)

    out: List[ChangeEntry] = []
    for k, ci in enumerate(unmatched_cur):
        if k < len(unmatched_prev):
            pi = unmatched_prev[k]
            out.append(
                ChangeEntry(
                    section=WORKING_TIMELINE,
                    kind="modified",
                    label=_timeline_label("modified", cur_items[ci]),
                    detail=_changed_fields(prev_views[pi], cur_views[ci]),
                )
            )
        else:
            out.append(ChangeEntry(section=WORKING_TIMELINE, kind="added", label=_timeline_label("added", cur_items[ci])))
    for pi in unmatched_prev[len(unmatched_cur):]:
        out.append(ChangeEntry(section=WORKING_TIMELINE, kind="removed", label=_timeline_label("removed", prev_items[pi])))
    return out


@dataclass(frozen=True)
class KeyedSection:
    """A list section whose items are matched across versions by a key."""
    section: str
    noun: str
    key_fields: Tuple[str, ...]
    label_field: str
    label_limit: int = 50
    qualifier: str = ""
    excluded: FrozenSet[str] = frozenset()
    # missing or null on older versions reads as []
    list_fields: FrozenSet[str] = frozenset()

    def key(self, item: Dict[str, Any]) -> str:
        parts = [str(item.get(f) or "").strip() for f in self.key_fields]
        if not parts[0]:
            return ""
        return "::".join(parts)

    def view(self, item: Dict[str, Any]) -> Dict[str, Any]:
        out = _view(item, self.excluded)
        for f in self.list_fields:
            if out.get(f) is None:
                out[f] = []
        return out

    def label(self, kind: str, item: Dict[str, Any]) -> str:
        name = _truncate(text(item.get(self.label_field)), self.label_limit)
        return f"{self.noun}: {kind} {self.qualifier}'{name}'"


KEYED_SECTIONS: Sequence[KeyedSection] = (
    KeyedSection(KEY_ENTITIES, "Entity", ("name", "type"), "name"),
    KeyedSection(CONTRADICTIONS, "Contradiction", ("issue",), "issue"),
    KeyedSection(HYPOTHESES, "Hypothesis", ("statement",), "statement"),
    KeyedSection(CRITICAL_GAPS, "Critical gap", ("missing_item",), "missing_item"),
    KeyedSection(VERIFICATION_TASKS, "Verification task", ("task",), "task"),
    KeyedSection(
        EVIDENCE_STRENGTH,
        "Evidence strength",
        ("theme",),
        "theme",
        label_limit=40,
        qualifier="theme ",
        excluded=EVIDENCE_STRENGTH_EXCLUDED,
        list_fields=frozenset({"supporting_refs"}),
    ),
)


def _keyed(brief: Dict[str, Any], keyed: KeyedSection) -> Dict[str, Dict[str, Any]]:
    # Later duplicates replace the value but keep the first position
    out: Dict[str, Dict[str, Any]] = {}
    for item in items(brief, keyed.section):
        key = keyed.key(item)
        if key:
            out[key] = item
    return out


def _diff_keyed(previous: Dict[str, Any], current: Dict[str, Any], keyed: KeyedSection) -> List[ChangeEntry]:
    before = _keyed(previous, keyed)
    after = _keyed(current, keyed)

    out: List[ChangeEntry] = []
    for key, item in after.items():
        if key not in before:
            out.append(ChangeEntry(section=keyed.section, kind="added", label=keyed.label("added", item)))
            continue
        old_view = keyed.view(before[key])
        new_view = keyed.view(item)
        if fingerprint(old_view) != fingerprint(new_view):
            out.append(
                ChangeEntry(
                    section=keyed.section,
                    kind="modified",
                    label=keyed.label("modified", item),
                    detail=_changed_fields(old_view, new_view),
                )
            )
    for key, item in before.items():
        if key not in after:
            out.append(ChangeEntry(section=keyed.section, kind="removed", label=keyed.label("removed", item)))
    return out


def compute_changes_since_last_version(
    previous: Optional[Dict[str, Any]],
    current: Dict[str, Any],
) -> Optional[List[ChangeEntry]]:
    """
    Changes from previous to current, section by section.
    Returns None when there is no previous version (first version of a brief).
    """
    if not isinstance(previous, dict):
        return None
    if not isinstance(current, dict):
        current = {}

    out: List[ChangeEntry] = []
    out.extend(_diff_executive_overview(previous, current))
    out.extend(_diff_timeline(previous, current))
    for keyed in KEYED_SECTIONS:
        out.extend(_diff_keyed(previous, current, keyed))

    logger.debug("brief diff: %d changes", len(out))
    return out
