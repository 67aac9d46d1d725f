from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich import print
from rich.markup import escape

from . import __version__
from .brief_diff import compute_changes_since_last_version
from .config import load_config, repo_root
from .pipeline import load_brief, process_brief, read_previous, store_brief
from .validation import BriefValidationError, validation_errors


def cmd_ping() -> None:
    cfg = load_config()
    root = repo_root()

    print(f"[bold]brief-analysis[/bold] version={__version__}")
    print(f"env={cfg.env}")
    print(f"log_level={cfg.log_level}")
    print(f"repo_root={root}")

    settings_path = root / "configs" / "settings.yaml"
    sources_path = root / "configs" / "sources.yaml"
    print(f"settings.yaml exists={settings_path.exists()}")
    print(f"sources.yaml exists={sources_path.exists()}")

    a = cfg.analysis
    print(
        f"central: >={a.central_min_mentions} mentions or top {a.central_top_n}; "
        f"isolated: =={a.isolated_mention_count}; spf: <={a.spf_max_refs} refs"
    )
    print(f"weak sources: {', '.join(a.weak_categories)} over {a.weak_source_ratio:.0%}")
    print(
        f"source policy: official={len(cfg.sources.official_domains)} "
        f"news={len(cfg.sources.news_domains)} social={len(cfg.sources.social_domains)}"
    )


def cmd_validate(brief_path: Path) -> int:
    errors = validation_errors(load_brief(brief_path))
    if errors:
        for err in errors:
            print(f"[red]invalid[/red] {brief_path}: {escape(err)}")
        return 1
    print(f"[green]valid[/green] {brief_path}")
    return 0


def cmd_analyze(brief_path: Path, previous_path: Optional[Path] = None, out_path: Optional[Path] = None) -> int:
    cfg = load_config()
    previous = read_previous(previous_path) if previous_path else None

    try:
        brief = process_brief(load_brief(brief_path), previous=previous, config=cfg)
    except BriefValidationError as e:
        print(f"[red]Brief validation failed[/red]: {escape(str(e))}")
        return 1

    target = out_path or brief_path.with_name(brief_path.stem + ".analyzed.json")
    store_brief(brief, target)

    network = brief["evidence_network"]
    score = brief["integrity_score"]
    print(f"analyzed: {target}")
    print(
        f"central={len(network['central_nodes'])} isolated={len(network['isolated_nodes'])} "
        f"single_point_failures={len(network['single_point_failures'])}"
    )
    print(f"coherence_alerts={len(brief['coherence_alerts'])}")
    if "changes_since_last_version" in brief:
        print(f"changes_since_last_version={len(brief['changes_since_last_version'])}")
    print(f"integrity={score['score_0_100']} grade={score['grade']}")
    return 0


def cmd_diff(previous_path: Path, current_path: Path) -> int:
    previous = read_previous(previous_path)
    current = load_brief(current_path)
    changes = compute_changes_since_last_version(previous, current if isinstance(current, dict) else {})
    if changes is None:
        print("no previous version; nothing to diff")
        return 0
    if not changes:
        print("no changes")
        return 0
    for c in changes:
        detail = f" ({c.detail})" if c.detail else ""
        print(f"[bold]{c.section}[/bold] {c.kind}: {escape(c.label)}{detail}")
    print(f"changes={len(changes)}")
    return 0
