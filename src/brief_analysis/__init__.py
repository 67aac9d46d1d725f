"""
brief-analysis: deterministic post-processing for OSINT case briefs.
"""
from .brief_diff import compute_changes_since_last_version
from .coherence import compute_coherence_alerts
from .evidence_index import EvidenceIndex
from .evidence_network import compute_evidence_network
from .evidence_strength import derive_evidence_strength_counts
from .integrity import compute_integrity_score
from .pipeline import analyze_brief, process_brief
from .validation import BriefValidationError, validate_brief

__version__ = "0.1.0"

__all__ = [
    "BriefValidationError",
    "EvidenceIndex",
    "analyze_brief",
    "compute_changes_since_last_version",
    "compute_coherence_alerts",
    "compute_evidence_network",
    "compute_integrity_score",
    "derive_evidence_strength_counts",
    "process_brief",
    "validate_brief",
]
