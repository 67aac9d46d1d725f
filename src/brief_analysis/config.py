from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .sources import DEFAULT_SOURCE_POLICY, SourcePolicy


def repo_root() -> Path:
    # Assumes this file lives at: repo/src/brief_analysis/config.py
    return Path(__file__).resolve().parents[2]


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Heuristic thresholds used by the analyzers.
    Defaults are the values the briefs were originally tuned against.
    """
    central_min_mentions: int = 3
    central_top_n: int = 5
    isolated_mention_count: int = 1
    max_isolated_nodes: int = 10
    spf_max_refs: int = 1
    max_single_point_failures: int = 10
    weak_source_ratio: float = 0.5
    weak_categories: Tuple[str, ...] = ("social", "unverified")
    max_alerts: int = 10

    @staticmethod
    def from_mapping(data: Optional[Dict[str, Any]]) -> "AnalysisSettings":
        if not data:
            return AnalysisSettings()
        if not isinstance(data, dict):
            raise ValueError("configs/settings.yaml 'analysis' must be a mapping")

        known = {f.name: f for f in fields(AnalysisSettings)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"Unknown analysis setting: {key}")
            if key == "weak_categories":
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ValueError("analysis.weak_categories must be a list of strings")
                kwargs[key] = tuple(v.strip().lower() for v in value if v.strip())
            elif key == "weak_source_ratio":
                kwargs[key] = float(value)
            else:
                kwargs[key] = int(value)

        settings = AnalysisSettings(**kwargs)
        if not 0.0 <= settings.weak_source_ratio <= 1.0:
            raise ValueError("analysis.weak_source_ratio must be between 0 and 1")
        if settings.central_top_n < 0 or settings.spf_max_refs < 1:
            raise ValueError("analysis.central_top_n must be >= 0 and spf_max_refs >= 1")
        return settings


DEFAULT_SETTINGS = AnalysisSettings()


@dataclass(frozen=True)
class AppConfig:
    env: str
    log_level: str
    analysis: AnalysisSettings = DEFAULT_SETTINGS
    sources: SourcePolicy = DEFAULT_SOURCE_POLICY
    settings: Dict[str, Any] = field(default_factory=dict)


def _load_optional(explicit: Optional[Path], default: Path) -> Dict[str, Any]:
    if explicit is not None:
        return load_yaml(explicit)
    if default.exists():
        return load_yaml(default)
    return {}


def load_config(
    settings_path: Optional[Path] = None,
    sources_path: Optional[Path] = None,
) -> AppConfig:
    load_dotenv(repo_root() / ".env")

    settings = _load_optional(settings_path, repo_root() / "configs" / "settings.yaml")
    sources = _load_optional(sources_path, repo_root() / "configs" / "sources.yaml")

    env = os.getenv("APP_ENV", settings.get("app", {}).get("env", "local"))
    log_level = os.getenv("BRIEF_ANALYSIS_LOG_LEVEL", settings.get("logging", {}).get("level", "INFO"))

    policy = DEFAULT_SOURCE_POLICY
    if sources:
        policy = SourcePolicy.from_config(
            official_domains=sources.get("official_domains", []),
            news_domains=sources.get("news_domains", []),
            social_domains=sources.get("social_domains", []),
        )

    return AppConfig(
        env=str(env),
        log_level=str(log_level).upper(),
        analysis=AnalysisSettings.from_mapping(settings.get("analysis")),
        sources=policy,
        settings=settings,
    )
