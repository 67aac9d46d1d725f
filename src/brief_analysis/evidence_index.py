from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


class EvidenceIndex:
    """
    Read-only view over a brief's evidence_index.

    A missing or malformed index behaves as empty. Lookups never raise:
    unknown or non-string ids resolve to None and are simply left out of
    counts by the analyzers.
    """

    def __init__(self, entries: Optional[Mapping[str, Any]] = None) -> None:
        self._entries: Dict[str, Dict[str, Any]] = {}
        if isinstance(entries, Mapping):
            for key, value in entries.items():
                if isinstance(key, str):
                    self._entries[key] = value if isinstance(value, dict) else {}

    @classmethod
    def from_brief(cls, brief: Any) -> "EvidenceIndex":
        if not isinstance(brief, Mapping):
            return cls()
        return cls(brief.get("evidence_index"))

    def __contains__(self, ref_id: object) -> bool:
        return isinstance(ref_id, str) and ref_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def ids(self) -> List[str]:
        return list(self._entries.keys())

    def resolve(self, ref_id: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(ref_id, str):
            return None
        return self._entries.get(ref_id)

    def tier_of(self, ref_id: Any) -> Optional[str]:
        entry = self.resolve(ref_id)
        if entry is None:
            return None
        tier = entry.get("source_tier")
        return tier if tier in ("primary", "secondary") else None

    def known(self, refs: Iterable[Any]) -> List[str]:
        """Resolvable refs, de-duplicated, in first-seen order."""
        out: List[str] = []
        seen = set()
        for ref in refs:
            if ref in self and ref not in seen:
                seen.add(ref)
                out.append(ref)
        return out
