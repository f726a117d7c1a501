from __future__ import annotations

import logging
from typing import Any

from skillpath.config import DEFAULT_CONFIG, EngineConfig
from skillpath.freshness import days_since
from skillpath.models import (
    GapAnalysisResult,
    GapEntry,
    UpskillGuidance,
    UpskillRecommendation,
)
from skillpath.normalize import (
    as_requirement,
    coerce_number,
    index_profile,
    require_sequence,
    resolve_skill_ref,
    round_half_up,
)

logger = logging.getLogger(__name__)

ASSESSMENT_LABELS = {
    "ready": "Ready to apply - strong skill match",
    "nearly_ready": "Nearly ready - minor skill gaps to address",
    "developing": "Developing - significant upskilling needed",
    "long_term": "Not ready - focus on building foundational skills",
}
BANDS = tuple(ASSESSMENT_LABELS)

GUIDANCE_SCI_FLOOR = 60
GUIDANCE_FRESHNESS_FLOOR = 50
BASELINE_SCI = 40


def readiness_band(readiness_pct: float, config: EngineConfig = DEFAULT_CONFIG) -> str:
    thresholds = config.readiness
    if readiness_pct >= thresholds.ready:
        return "ready"
    if readiness_pct >= thresholds.nearly_ready:
        return "nearly_ready"
    if readiness_pct >= thresholds.developing:
        return "developing"
    return "long_term"


def overall_assessment(readiness_pct: float, config: EngineConfig = DEFAULT_CONFIG) -> str:
    return ASSESSMENT_LABELS[readiness_band(readiness_pct, config)]


def analyze_skill_gap(profile: Any, requirements: Any, config: EngineConfig | None = None) -> GapAnalysisResult:
    config = config or DEFAULT_CONFIG
    lookup = index_profile(profile)
    missing: list[GapEntry] = []
    weak: list[GapEntry] = []
    strong: list[GapEntry] = []

    for raw in require_sequence(requirements, "requirements"):
        requirement = as_requirement(raw)
        ref = resolve_skill_ref(requirement.skill)
        if not ref.resolved:
            logger.debug("Skipping requirement with unresolved skill reference: %r", requirement.skill)
            continue
        required = coerce_number(requirement.minimum_sci, config.default_role_min_sci)
        match = lookup.get(ref.skill_id)

        if match is None:
            missing.append(GapEntry(skill=ref, required_sci=required, user_sci=0.0, gap=required))
            continue

        owned_ref, entry = match
        if ref.name is None and owned_ref.name is not None:
            ref = owned_ref
        user_sci = coerce_number(entry.sci)
        if user_sci >= required:
            strong.append(GapEntry(skill=ref, required_sci=required, user_sci=user_sci, exceeds=user_sci - required))
        else:
            weak.append(GapEntry(skill=ref, required_sci=required, user_sci=user_sci, gap=required - user_sci))

    total = len(missing) + len(weak) + len(strong)
    readiness = 100 if total == 0 else int(round_half_up(len(strong) / total * 100))

    return GapAnalysisResult(
        readiness_percentage=readiness,
        missing_skills=missing,
        weak_skills=weak,
        strong_skills=strong,
        overall_assessment=overall_assessment(readiness, config),
        band=readiness_band(readiness, config),
    )


def recommend_upskilling(result: GapAnalysisResult, config: EngineConfig | None = None) -> list[UpskillRecommendation]:
    config = config or DEFAULT_CONFIG
    recommendations = [
        UpskillRecommendation(
            skill=gap.skill,
            priority="HIGH",
            reason=f"Missing required skill (target SCI: {gap.required_sci:g})",
            target_sci=gap.required_sci,
            current_sci=0.0,
            action="Learn this skill from scratch",
        )
        for gap in result.missing_skills
    ]

    for gap in sorted(result.weak_skills, key=lambda g: g.gap or 0.0, reverse=True):
        recommendations.append(
            UpskillRecommendation(
                skill=gap.skill,
                priority="HIGH" if (gap.gap or 0.0) > config.high_priority_gap else "MEDIUM",
                reason=f"Current SCI ({gap.user_sci:g}) below required ({gap.required_sci:g})",
                target_sci=gap.required_sci,
                current_sci=gap.user_sci,
                action="Practice and reassess to improve confidence",
            )
        )
    return recommendations


def _guidance_advice(sci: float, freshness: float) -> str:
    if sci < BASELINE_SCI:
        return "Take assessment to establish baseline, then practice"
    if freshness < GUIDANCE_FRESHNESS_FLOOR:
        return "Skill may be outdated - refresh knowledge and reassess"
    return "Practice and retake assessment to improve score"


def build_upskilling_guidance(profile: Any, now: Any = None) -> list[UpskillGuidance]:
    flagged = []
    for ref, entry in index_profile(profile).values():
        sci = coerce_number(entry.sci)
        freshness = coerce_number(entry.freshness_score)
        if sci < GUIDANCE_SCI_FLOOR or freshness < GUIDANCE_FRESHNESS_FLOOR:
            flagged.append((ref, entry, sci, freshness))

    flagged.sort(key=lambda item: item[2])
    return [
        UpskillGuidance(
            skill_name=ref.display_name,
            current_sci=sci,
            freshness_score=freshness,
            last_used_days=days_since(entry.last_used_date, now),
            recommendation=_guidance_advice(sci, freshness),
        )
        for ref, entry, sci, freshness in flagged
    ]
