from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "SKILLPATH_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "engine.yaml"


@dataclass(frozen=True)
class SCIWeights:
    assessment: float = 0.40
    freshness: float = 0.35
    scenario: float = 0.25

    def __post_init__(self):
        values = (self.assessment, self.freshness, self.scenario)
        if any(value < 0 for value in values):
            raise ValueError(f"SCI weights must be non-negative: {values}")
        if abs(sum(values) - 1.0) > 1e-9:
            raise ValueError(f"SCI weights must sum to 1.0, got {sum(values):.4f}")

    def as_dict(self) -> dict[str, float]:
        return {
            "assessment": self.assessment,
            "freshness": self.freshness,
            "scenario": self.scenario,
        }


@dataclass(frozen=True)
class ReadinessThresholds:
    ready: int = 80
    nearly_ready: int = 60
    developing: int = 40

    def __post_init__(self):
        if not self.ready >= self.nearly_ready >= self.developing >= 0:
            raise ValueError("Readiness thresholds must be descending: ready >= nearly_ready >= developing >= 0")


@dataclass(frozen=True)
class EngineConfig:
    weights: SCIWeights = field(default_factory=SCIWeights)
    readiness: ReadinessThresholds = field(default_factory=ReadinessThresholds)
    default_role_min_sci: float = 60
    default_job_min_sci: float = 50
    default_importance: int = 3
    high_priority_gap: float = 20
    career_path_depth: int = 3
    max_workers: int = 1

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> EngineConfig:
        raw = dict(raw or {})
        weights = SCIWeights(**(raw.pop("weights", None) or {}))
        readiness = ReadinessThresholds(**(raw.pop("readiness", None) or {}))
        known = {key: value for key, value in raw.items() if key in cls.__dataclass_fields__}
        return cls(weights=weights, readiness=readiness, **known)


DEFAULT_CONFIG = EngineConfig()


def load_config(path: str | Path | None = None) -> EngineConfig:
    config_path = Path(path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        return DEFAULT_CONFIG
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return EngineConfig.from_dict(raw.get("engine", raw))
