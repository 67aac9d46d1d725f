from brief_analysis.config import AnalysisSettings
from brief_analysis.coherence import compute_coherence_alerts


INDEX = {
    "gov1": {"type": "url", "url": "https://www.sec.gov/filing/1"},
    "news1": {"type": "url", "url": "https://www.reuters.com/a"},
    "soc1": {"type": "url", "url": "https://x.com/someone/status/1"},
    "soc2": {"type": "url", "url": "https://www.reddit.com/r/x/1"},
    "soc_primary": {"type": "url", "url": "https://x.com/ceo/status/2", "source_tier": "primary"},
    "bare": {"type": "url"},
}


def brief(**sections):
    b = {
        "executive_overview": "",
        "evidence_index": dict(INDEX),
        "working_timeline": [],
        "key_entities": [],
        "contradictions_tensions": [],
        "verification_tasks": [],
    }
    b.update(sections)
    return b


def event(refs, text="Office opened", confidence="medium", **extra):
    item = {"time_window": "2024-01", "event": text, "confidence": confidence, "basis": "public", "source_ids": refs}
    item.update(extra)
    return item


def hypothesis(likelihood, against, statement="Shell company"):
    return {
        "statement": statement,
        "likelihood": likelihood,
        "evidence_for": ["gov1"],
        "evidence_against": against,
        "falsification_tests": [],
    }


def contradiction(tasks, issue="Founding date"):
    return {
        "issue": issue,
        "issue_type": "date",
        "statement_a": "2019",
        "statement_a_refs": ["gov1"],
        "statement_b": "2021",
        "statement_b_refs": ["news1"],
        "why_it_matters": "Timeline",
        "resolution_tasks": tasks,
    }


def test_empty_brief_has_no_alerts():
    assert compute_coherence_alerts(brief()) == []
    assert compute_coherence_alerts({}) == []
    assert compute_coherence_alerts(None) == []


def test_high_likelihood_with_counter_evidence():
    alerts = compute_coherence_alerts(brief(hypotheses=[hypothesis("high", ["news1"])]))
    assert len(alerts) == 1
    a = alerts[0]
    assert a.severity == "high"
    assert a.alert == "High-likelihood hypothesis 'Shell company' has evidence weighing against it."
    assert a.affected_sections == ["hypotheses"]
    assert a.related_evidence_ids == ["news1"]


def test_high_likelihood_without_counter_evidence_is_fine():
    assert compute_coherence_alerts(brief(hypotheses=[hypothesis("high", [])])) == []
    assert compute_coherence_alerts(brief(hypotheses=[hypothesis("medium", ["news1"])])) == []


def test_verified_event_with_one_reference():
    b = brief(working_timeline=[
        event(["gov1"], text="Registered", verified=True),
        event([], text="Announced", verified=True),
        event(["gov1", "news1"], text="Funded", verified=True),
        event(["gov1"], text="Unchecked"),
    ])
    alerts = compute_coherence_alerts(b)
    assert [a.alert for a in alerts] == [
        "Verified timeline event 'Registered' is supported by zero or one reference.",
        "Verified timeline event 'Announced' is supported by zero or one reference.",
    ]
    assert all(a.severity == "high" for a in alerts)
    assert alerts[0].related_evidence_ids == ["gov1"]
    assert alerts[1].related_evidence_ids == []


def test_high_confidence_on_weak_sources():
    b = brief(working_timeline=[event(["soc1", "soc2", "gov1"], text="Raid", confidence="high")])
    alerts = compute_coherence_alerts(b)
    assert len(alerts) == 1
    assert alerts[0].severity == "medium"
    assert alerts[0].alert == "High-confidence timeline event 'Raid' relies primarily on social or unverified sources."
    assert alerts[0].related_evidence_ids == ["soc1", "soc2", "gov1"]


def test_weak_share_must_exceed_half():
    b = brief(working_timeline=[event(["soc1", "gov1"], confidence="high")])
    assert compute_coherence_alerts(b) == []


def test_unresolvable_refs_count_as_unverified():
    b = brief(working_timeline=[event(["bare", "ghost"], confidence="high")])
    alerts = compute_coherence_alerts(b)
    assert [a.severity for a in alerts] == ["medium"]
    assert alerts[0].related_evidence_ids == ["bare"]


def test_primary_tier_is_never_weak():
    b = brief(working_timeline=[event(["soc_primary", "soc1"], confidence="high")])
    assert compute_coherence_alerts(b) == []


def test_weak_ratio_setting():
    b = brief(working_timeline=[event(["soc1", "gov1"], confidence="high")])
    alerts = compute_coherence_alerts(b, AnalysisSettings(weak_source_ratio=0.4))
    assert len(alerts) == 1


def test_contradiction_without_resolution_tasks():
    b = brief(contradictions_tensions=[
        contradiction([], issue="Founding date"),
        contradiction(["Pull registry extract"], issue="Headcount"),
        {"issue": "Old style", "details": "d", "source_refs": ["news1"]},
    ])
    alerts = compute_coherence_alerts(b)
    assert [a.alert for a in alerts] == [
        "Contradiction 'Founding date' has no resolution tasks.",
        "Contradiction 'Old style' has no resolution tasks.",
    ]
    assert alerts[0].related_evidence_ids == ["gov1", "news1"]


def test_ordered_by_severity():
    b = brief(
        working_timeline=[event(["soc1"], text="Rumour", confidence="high")],
        hypotheses=[hypothesis("high", ["news1"])],
    )
    alerts = compute_coherence_alerts(b)
    assert [a.severity for a in alerts] == ["high", "medium"]


def test_identical_items_each_get_an_alert():
    b = brief(contradictions_tensions=[
        {"issue": "Date", "details": "a", "source_refs": ["gov1"]},
        {"issue": "Date", "details": "b", "source_refs": ["news1"]},
    ])
    alerts = compute_coherence_alerts(b)
    assert [a.alert for a in alerts] == ["Contradiction 'Date' has no resolution tasks."] * 2
    assert [a.related_evidence_ids for a in alerts] == [["gov1"], ["news1"]]


def test_alert_cap():
    many = [event(["gov1"], text=f"Event {i}", verified=True) for i in range(15)]
    assert len(compute_coherence_alerts(brief(working_timeline=many))) == 10
    assert len(compute_coherence_alerts(brief(working_timeline=many), AnalysisSettings(max_alerts=3))) == 3


def test_long_text_is_truncated_in_message():
    long_text = "x" * 80
    alerts = compute_coherence_alerts(brief(working_timeline=[event(["gov1"], text=long_text, verified=True)]))
    assert ("'" + "x" * 60 + "…'") in alerts[0].alert


def test_deterministic():
    b = brief(
        working_timeline=[event(["soc1"], confidence="high", verified=True)],
        contradictions_tensions=[contradiction([])],
        hypotheses=[hypothesis("high", ["news1"])],
    )
    first = [a.model_dump() for a in compute_coherence_alerts(b)]
    second = [a.model_dump() for a in compute_coherence_alerts(b)]
    assert first == second
    assert [a["severity"] for a in first] == ["high", "high", "high", "medium"]
