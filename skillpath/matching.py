from __future__ import annotations

import logging
from typing import Any

import numpy as np

from skillpath.config import DEFAULT_CONFIG, EngineConfig
from skillpath.models import SkillMatchItem, SkillMatchResult
from skillpath.normalize import (
    as_requirement,
    coerce_number,
    index_profile,
    require_sequence,
    resolve_skill_ref,
    round_half_up,
)

logger = logging.getLogger(__name__)

MAX_SCI = 100.0


def calculate_skill_match(profile: Any, requirements: Any, config: EngineConfig | None = None) -> SkillMatchResult:
    config = config or DEFAULT_CONFIG
    lookup = index_profile(profile if profile is not None else [])
    importances: list[float] = []
    scis: list[float] = []
    breakdown: list[SkillMatchItem] = []

    for raw in require_sequence(requirements, "requirements"):
        requirement = as_requirement(raw)
        ref = resolve_skill_ref(requirement.skill)
        if not ref.resolved:
            logger.debug("Skipping job requirement with unresolved skill reference: %r", requirement.skill)
            continue
        importance = coerce_number(requirement.importance, config.default_importance)
        min_sci = coerce_number(requirement.minimum_sci, config.default_job_min_sci)
        match = lookup.get(ref.skill_id)

        if match is None:
            sci = 0.0
            breakdown.append(
                SkillMatchItem(
                    skill_name=ref.display_name,
                    importance=importance,
                    min_sci=min_sci,
                    candidate_sci=0.0,
                    score=0.0,
                    max_score=importance * MAX_SCI,
                    status="missing",
                )
            )
        else:
            owned_ref, entry = match
            sci = coerce_number(entry.sci)
            breakdown.append(
                SkillMatchItem(
                    skill_name=ref.name or owned_ref.display_name,
                    importance=importance,
                    min_sci=min_sci,
                    candidate_sci=sci,
                    score=importance * sci,
                    max_score=importance * MAX_SCI,
                    status="meets" if sci >= min_sci else "below",
                    freshness_score=coerce_number(entry.freshness_score),
                )
            )
        importances.append(importance)
        scis.append(sci)

    weights = np.array(importances, dtype=float)
    # cumsum adds left to right, the same order as a running total
    total_score = float(np.cumsum(weights * np.array(scis, dtype=float))[-1]) if importances else 0.0
    max_possible = float(np.cumsum(weights * MAX_SCI)[-1]) if importances else 0.0
    match_pct = int(round_half_up(total_score / max_possible * 100)) if max_possible > 0 else 0

    return SkillMatchResult(
        match_percentage=match_pct,
        total_score=total_score,
        max_possible_score=max_possible,
        breakdown=breakdown,
    )
